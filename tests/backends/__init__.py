"""Tests for search backend clients."""
