"""Rotation math helpers."""
