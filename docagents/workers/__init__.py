"""Stage worker processes."""
