"""Tests for filter expressions."""
