"""Media downloads and archive extraction."""
