"""Host adapters for the file manager engine."""
