"""Tests for the Sonos Now Playing engine."""
