"""
Common types shared across all modules.

This module provides the value types used by the geometry and editing
layers, ensuring consistency and type safety between them.
"""

from quadscan.common.types import Point, Rect, Size

__all__ = ["Point", "Rect", "Size"]
