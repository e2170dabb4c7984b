"""Shared test fixtures."""

import os

import pytest


def _open_fds() -> set[str] | None:
    for path in ("/proc/self/fd", "/dev/fd"):
        if os.path.isdir(path):
            return set(os.listdir(path))
    return None


@pytest.fixture
def fd_snapshot():
    """Return a callable listing this process's open fds (skips if unsupported)."""
    if _open_fds() is None:
        pytest.skip("cannot enumerate open file descriptors")
    return _open_fds


@pytest.fixture
def mock_execute(monkeypatch):
    """Mock executor.execute for CLI tests."""
    from pgrun import executor
    from pgrun.result import Result

    calls = []
    responses = []

    def fake_execute(argv, cwd=None, raise_on_fail=False):
        calls.append((list(argv), cwd, raise_on_fail))
        if responses:
            response = responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response
        return Result(command=tuple(argv), stdout=b"", stderr=b"", exit_code=0)

    monkeypatch.setattr(executor, "execute", fake_execute)

    return type("MockExecute", (), {"calls": calls, "responses": responses})()
