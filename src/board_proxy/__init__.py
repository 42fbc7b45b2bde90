"""REST-to-GraphQL proxy for monday.com boards."""

__version__ = "0.1.0"
