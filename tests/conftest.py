"""
Shared test doubles for gitremote.

FakeBase stands in for a git environment: it records every command it is
asked to run and answers with canned ls-remote output.
"""

import os

import pytest


class FakeHandle:
    def __init__(self, base, argv, skip_entrypoint):
        self.base = base
        self.argv = list(argv)
        self.skip_entrypoint = skip_entrypoint

    def stdout(self, timeout=None, cancel=None):
        self.base.timeouts.append(timeout)
        self.base.cancels.append(cancel)
        answer = self.base.responder(self.argv)
        if isinstance(answer, BaseException):
            raise answer
        return answer


class FakeBase:
    """
    Git environment double.

    Args:
        responder: str returned for every command, or a callable taking
            argv and returning output (or an exception to raise)
    """

    def __init__(self, responder=""):
        if callable(responder):
            self.responder = responder
        else:
            self.responder = lambda argv: responder
        self.calls = []
        self.timeouts = []
        self.cancels = []

    def run(self, argv, skip_entrypoint=False):
        self.calls.append((list(argv), skip_entrypoint))
        return FakeHandle(self, argv, skip_entrypoint)


@pytest.fixture
def make_base():
    return FakeBase


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point HOME at an empty directory and drop GITREMOTE_* overrides."""
    monkeypatch.setenv("HOME", str(tmp_path))
    for key in list(os.environ):
        if key.startswith("GITREMOTE_"):
            monkeypatch.delenv(key)
    return tmp_path
