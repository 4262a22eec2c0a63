"""Core template definition types."""
