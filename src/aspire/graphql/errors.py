"""
GraphQL error types surfaced to API clients.

Each error carries an ``extensions.code`` so clients can branch on the kind
of failure without parsing messages.
"""

from graphql import GraphQLError


class AuthenticationError(GraphQLError):
    """No verified identity where one is required, or bad credentials."""

    code = "UNAUTHENTICATED"

    def __init__(self, message: str = "You need to be logged in!"):
        super().__init__(message, extensions={"code": self.code})


class NotFoundError(GraphQLError):
    """A referenced record does not exist."""

    code = "NOT_FOUND"

    def __init__(self, message: str = "Not found"):
        super().__init__(message, extensions={"code": self.code})


class InvalidInputError(GraphQLError):
    """Client supplied input that cannot be accepted."""

    code = "BAD_USER_INPUT"

    def __init__(self, message: str):
        super().__init__(message, extensions={"code": self.code})
