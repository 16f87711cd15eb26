"""
Test Fixtures

Shared test data factories.
"""

from .factories import ClipFactory, StoreFactory, make_channel

__all__ = [
    "ClipFactory",
    "StoreFactory",
    "make_channel",
]
