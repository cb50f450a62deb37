"""
quadscan: editable document quadrilateral core.

Tracks a user-adjustable quadrilateral over a displayed image and converts
it between detector, display, source-image, and cartesian output spaces.
"""

__version__ = "0.1.0"
