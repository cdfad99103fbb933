from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from tests.helpers import write_xlsx


@pytest.fixture
def make_xlsx(tmp_path: Path) -> Callable[..., Path]:
    counter = {"n": 0}

    def _make(parts: dict[str, str | bytes], name: str | None = None) -> Path:
        counter["n"] += 1
        return write_xlsx(tmp_path / (name or f"book{counter['n']}.xlsx"), parts)

    return _make
