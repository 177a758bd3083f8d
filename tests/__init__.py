"""Tests for Sonos Now Playing."""
