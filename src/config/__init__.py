"""Application settings and per-note-type preferences."""
