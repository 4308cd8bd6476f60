"""Shared fixtures for app-level tests."""
import json
from pathlib import Path

import pytest
from dependency_injector import providers

from npm_audit_reporter.app.container import Container

from helpers import MANIFEST, Calls, FakeAuditRunner, FakeDelivery


@pytest.fixture
def npm_project(tmp_path) -> Path:
    """A project root with a package.json and no git repository."""
    root = tmp_path / "webapp"
    root.mkdir()
    (root / "package.json").write_text(json.dumps(MANIFEST, indent=2), encoding="utf-8")
    return root


class MockedWiring:
    def __init__(self) -> None:
        self.calls = Calls()
        self.audit_runner = FakeAuditRunner(self.calls)
        self.delivery = FakeDelivery(self.calls)
        self.created = 0

    def create(self) -> Container:
        self.created += 1
        c = Container()
        c.audit_runner.override(providers.Object(self.audit_runner))
        c.transport.override(providers.Object(self.delivery))
        return c


@pytest.fixture
def mocked_wiring(monkeypatch) -> MockedWiring:
    """Patch the container factory used by the CLI and facade so npm and the network are faked."""
    wiring = MockedWiring()
    monkeypatch.setattr("npm_audit_reporter.app.main.Container", wiring.create)
    return wiring
