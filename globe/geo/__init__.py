"""Longitude/latitude geometry: projection, resampling and triangulation."""
