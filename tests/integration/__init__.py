# Integration Tests
"""
Integration tests verify complete administrator and voter workflows through
the HTTP API.

Principle: Test behavior, not implementation.
"""
