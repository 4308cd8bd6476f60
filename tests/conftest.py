import sys
from pathlib import Path

import pytest

# src-layout: make the package importable without installation
_SRC = Path(__file__).resolve().parents[1] / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from helpers import mark_by_dir  # noqa: E402


TESTS = Path(__file__).parent


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep real NPM_AUDIT_REPORTER_* variables and the user cache dir out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("NPM_AUDIT_REPORTER_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("NPM_AUDIT_REPORTER_DIRECTORIES__HOME", str(tmp_path / "home"))
    yield


def pytest_collection_modifyitems(config, items):
    # Mark tests by directory structure
    mark_by_dir(items, TESTS / "npm_audit_reporter" / "core", pytest.mark.unit)
    mark_by_dir(items, TESTS / "npm_audit_reporter" / "infra", pytest.mark.integration)
    mark_by_dir(items, TESTS / "npm_audit_reporter" / "app", pytest.mark.e2e)
