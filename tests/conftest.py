from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
import yaml
from loguru import logger


@dataclass
class FakeVCS:
    remote_url: str = "git@git.example.com:team/my_app.git"
    branch: str = "main"
    revision: str = "0123456789abcdef0123456789abcdef01234567"

    def current_remote_url(self) -> str:
        return self.remote_url

    def current_branch(self) -> str:
        return self.branch

    def current_revision(self) -> str:
        return self.revision


@pytest.fixture()
def fake_vcs() -> FakeVCS:
    return FakeVCS()


@pytest.fixture()
def write_project(tmp_path: Path):
    def _write(**overrides: Any) -> Path:
        data: dict[str, Any] = {
            "app": "my_app",
            "version": "1.2.0",
            "description": "An example application",
            "homepage_url": "https://example.com/my_app",
            "package": {"licenses": ["Apache-2.0"]},
            "deps": [],
        }
        data.update(overrides)
        (tmp_path / "bbgen.yaml").write_text(yaml.safe_dump(data), encoding="utf-8")
        return tmp_path

    return _write


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logger.remove()
