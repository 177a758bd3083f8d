"""Package with common/shared helpers."""
