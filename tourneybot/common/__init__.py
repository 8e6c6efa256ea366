"""Shared helpers used across TourneyBot layers."""
