"""
Pytest Configuration and Shared Fixtures

This file contains pytest configuration and fixtures that are available
to all test modules.
"""

from typing import List, Tuple

import pytest

from quadscan.common.types import Size
from quadscan.editing.config_loader import load_config
from quadscan.geometry.quadrilateral import Quadrilateral


class RecordingRenderer:
    """Renderer double that records every call it receives."""

    def __init__(self):
        self.calls: List[Tuple] = []

    def draw_quadrilateral(self, quad, animated):
        self.calls.append(("draw", quad.model_copy(), animated))

    def remove_quadrilateral(self):
        self.calls.append(("remove",))

    def highlight_handle(self, handle):
        self.calls.append(("highlight", handle))

    def reset_highlighted_handles(self):
        self.calls.append(("reset",))

    def names(self) -> List[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def square_quad():
    """Fixture providing the 100x100 square at the origin."""
    return Quadrilateral.from_numpy([[0, 0], [100, 0], [100, 100], [0, 100]])


@pytest.fixture
def inset_quad():
    """Fixture providing a square inset 10px inside a 100x100 view."""
    return Quadrilateral.from_numpy([[10, 10], [90, 10], [90, 90], [10, 90]])


@pytest.fixture
def sample_quadrilateral():
    """Fixture providing an irregular, perspective-distorted document outline."""
    return Quadrilateral.from_numpy(
        [
            [100, 200],  # Top-left
            [300, 150],  # Top-right
            [320, 400],  # Bottom-right
            [80, 380],  # Bottom-left
        ]
    )


@pytest.fixture
def view_size():
    return Size(width=100, height=100)


@pytest.fixture
def editor_config():
    """Fixture providing the default editing configuration."""
    return load_config()


@pytest.fixture
def renderer():
    return RecordingRenderer()
