"""Utility functions for recordproto.

This module provides payload size calculation and inspection helpers.
"""

from __future__ import annotations

from .sizing import encoded_size, payload_of

__all__ = [
    "encoded_size",
    "payload_of",
]
