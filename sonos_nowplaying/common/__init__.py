"""Common models and helpers shared by the server and its consumers."""
