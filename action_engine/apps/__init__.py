"""Application entrypoints."""
