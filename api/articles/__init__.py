"""Article collection accessors and routes."""
