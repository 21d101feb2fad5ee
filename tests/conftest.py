"""Shared fakes: no test runs a real subprocess, sudo or network call"""

import pytest

from hostkit.errors import CommandError
from hostkit.system.runner import CommandResult


class FakeRunner:
    """Stand-in for ``run_command`` answering from a prefix table.

    ``responses`` is a list of ``(prefix, answer)``; the first prefix matching
    the start of the argv wins. ``answer`` is a return code, a
    ``(returncode, stdout, stderr)`` tuple or a callable taking
    ``(args, input)`` and returning one of those.
    """

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    def __call__(self, cmd, *, input=None, env=None, cwd=None, check=True, timeout=None):
        args = [str(c) for c in cmd]
        self.calls.append((args, input))

        answer = 0
        for prefix, candidate in self.responses:
            if args[: len(prefix)] == list(prefix):
                answer = candidate
                break
        if callable(answer):
            answer = answer(args, input)
        if isinstance(answer, int):
            answer = (answer, "", "")

        result = CommandResult(args, *answer)
        if check and not result.ok:
            raise CommandError(args, result.returncode, result.stderr)
        return result

    @property
    def commands(self):
        return [args for args, _ in self.calls]


class FakeExecutor:
    """Stand-in for ``PrivilegedExecutor`` that records every command"""

    def __init__(self, responses=None, privileged=False):
        self.runner = FakeRunner(responses)
        self.privileged = privileged

    def is_privileged(self):
        return self.privileged

    def run(self, cmd, *, input=None, env=None, cwd=None, check=True):
        argv = [str(c) for c in cmd]
        if env:
            argv = ["env"] + [f"{k}={v}" for k, v in env.items()] + argv
        return self.runner(argv, input=input, check=check)

    @property
    def commands(self):
        return self.runner.commands

    @property
    def calls(self):
        return self.runner.calls


@pytest.fixture
def fake_executor():
    """Executor that succeeds on every command"""
    return FakeExecutor()


@pytest.fixture
def make_runner():
    """Build a ``FakeRunner`` from a response table"""
    return FakeRunner


@pytest.fixture
def make_executor():
    """Build a ``FakeExecutor`` from a response table"""
    return FakeExecutor
