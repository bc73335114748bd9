"""Database provider adapters."""
