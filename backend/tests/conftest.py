from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _reset_model_client() -> None:
    from rubricscore.main import app

    app.state.model_client = None
    yield
    app.state.model_client = None
