"""Resolver package for the GraphQL schema.

Resolvers are plain async functions taking the Strawberry ``info`` object;
the root query and mutation types import them lazily.
"""
