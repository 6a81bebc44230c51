"""Pytest configuration for arspaint tests."""

import numpy as np
import pytest

from arspaint.api.document import Document
from arspaint.tools import ToolSettings


@pytest.fixture
def document() -> Document:
    """100x100 document with an opaque white background."""
    return Document.new((100, 100))


@pytest.fixture
def settings() -> ToolSettings:
    return ToolSettings()


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(0)
