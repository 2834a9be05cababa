"""Project collection accessors and routes."""
