"""Database models, sessions and the storage layer."""
