"""Gallery collection accessors and routes."""
