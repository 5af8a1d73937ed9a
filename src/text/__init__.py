"""Pure text operations: highlighting and example selection."""
