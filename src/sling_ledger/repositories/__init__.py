"""Activity storage: protocol plus in-memory and SQLAlchemy implementations."""
