"""Sonos Now Playing: multi-room transport control and now playing aggregation."""
