# tests/conftest.py
from __future__ import annotations

import pytest

from numfields import runtime
from numfields.rings import QuadraticRing


@pytest.fixture(autouse=True)
def isolated_workspace(tmp_path, monkeypatch):
    """Point the workspace at a temp dir and start every test from default settings."""
    ws = tmp_path / "Numfields"
    monkeypatch.setenv("NUMFIELDS_HOME", str(ws))
    runtime.reset()
    yield ws
    runtime.reset()


@pytest.fixture(scope="session")
def zi():
    return QuadraticRing(-1)


@pytest.fixture(scope="session")
def z2():
    return QuadraticRing(2)


@pytest.fixture(scope="session")
def eisenstein():
    return QuadraticRing(-3)


@pytest.fixture(scope="session")
def golden():
    return QuadraticRing(5)
