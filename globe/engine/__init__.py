"""Logging, settings and the frame loop."""
