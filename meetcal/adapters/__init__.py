"""
Adapters layer - File-backed implementations of the external collaborators.
"""

from .fixture_store import FixtureData, FixtureStore

__all__ = ["FixtureData", "FixtureStore"]
