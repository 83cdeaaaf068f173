"""Shared pytest configuration for the calculator test suite."""
from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest


# Ensure the repository root (which holds the top-level packages) is importable.
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def jan_1() -> date:
    return date(2024, 1, 1)
