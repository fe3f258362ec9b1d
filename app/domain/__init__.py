"""
Domain Package
==============
Plant entity, value objects and the pure rules deriving lifecycle state.

Scoring and lifecycle rules are plain functions with no I/O, so they can be
exercised directly by tests and reused by any service.
"""

from .plant import Metrics, Plant

__all__ = [
    "Metrics",
    "Plant",
]
