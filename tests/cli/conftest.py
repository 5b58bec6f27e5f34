"""Shared fixtures for CLI tests."""

from pathlib import Path

import pytest

from taloutline.config import loader


@pytest.fixture(autouse=True)
def isolated_cli(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each CLI test in tmp_path with no global or env config."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml")
    for var in ("TAL_OUTLINE__SCAN__ENCODING", "TAL_OUTLINE__LOGGING__LEVEL"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path
