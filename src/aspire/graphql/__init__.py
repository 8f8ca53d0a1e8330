"""GraphQL API for Aspire."""
