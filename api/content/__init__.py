"""
Content collections: frontmatter schemas, file loading, the SQL-backed index
and the query builder the per-collection accessors are written against.
"""
