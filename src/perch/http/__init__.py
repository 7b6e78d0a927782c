"""HTTP primitives: immutable Request and Response, headers, query, forms."""
