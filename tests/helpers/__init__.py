"""Shared helpers for TourneyBot tests."""
