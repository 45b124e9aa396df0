"""Pydantic record modeling for recordproto.

This module provides the Record base class and field helpers for declaring
serializable schemas.
"""

from __future__ import annotations

from .base import Record
from .fields import FieldIndex

__all__ = [
    "Record",
    "FieldIndex",
]
