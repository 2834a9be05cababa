"""HTTP client helpers for the content API."""
