"""Test suite for the esvectorstore library.

The test suite is organized into the following modules:
- tests/filters: Filter expression tree, builders, parsers and compilation
- tests/backends: Elasticsearch backend client
- tests/utils: Configuration, logging and document conversion
- tests/test_*.py: Query building, result mapping, index lifecycle,
  bulk mutations and the store facade

Backends are replaced by an in-memory fake or a mocked Elasticsearch client,
so no running cluster is required.
"""
