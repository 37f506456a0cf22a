"""
The `helpers` package provides utility functions and decorators
that support database operations and cross-cutting concerns.

Contents
--------
- transactionManagement
    `@transactional` service methods: reuse the session in context or open
    one from the service's store, commit on success, roll back on error.
- identifiers
    Typed cross-collection references and `parse_object_id`.
- documents
    camelCase document <-> entity conversion.
- pagination
    `parse_page_params` and `total_pages`.
"""
