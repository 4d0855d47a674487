from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def write_properties(tmp_path: Path) -> Callable[..., Path]:
    def write(entries: dict[str, str] = None, text: str = "", name: str = "app.properties") -> Path:
        lines = [f"{key}={value}" for key, value in (entries or {}).items()]
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n" + text, encoding="utf-8")
        return path

    return write
