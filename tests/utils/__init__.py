"""Tests for utility modules.

Covers configuration loading and environment resolution, logger setup, and
conversion between Haystack documents and stored Elasticsearch bodies.
"""
