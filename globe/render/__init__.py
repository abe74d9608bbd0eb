"""Renderer-facing outputs: meshes, camera transitions and overlays."""
