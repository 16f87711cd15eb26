"""
ClipCast Test Suite

Test Categories:
- unit/: Fast, isolated unit tests
- integration/: API tests against an in-memory store
- fixtures/: Shared test data factories
"""
