"""
Test Suite for the ShelfSnap Planogram Comparator

This package contains unit tests and integration tests for:
- Cell geometry derivation
- Matching, classification and overstock sweep
- Misplacement policies, builder, scan state and sources

Run tests with: pytest -v
"""
