"""
Aspire backend
GraphQL API for user aspirations organised in folders
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
