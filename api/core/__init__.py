"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every feature uses (DB wiring,
environment settings). Content parsing and collection SQL live in `content/`;
the per-collection accessors live in `articles/`, `gallery/` and `projects/`.
"""
