"""Server specific helpers."""
