"""Package with the core controllers of the server."""
