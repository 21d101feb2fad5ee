"""Tests for the credential cache"""

import stat

import pytest

from hostkit.errors import ElevationFailed
from hostkit.privilege.credential import CredentialStore

VERIFY = ["sudo", "-S", "-k", "-p", "", "true"]


class Prompt:
    """Operator typing the given answers in order"""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.count = 0

    def __call__(self):
        self.count += 1
        return self.answers.pop(0)


def accept_only(password):
    def verify(args, input):
        return 0 if input == password + "\n" else (1, "", "Sorry, try again.")

    return verify


@pytest.fixture
def cred_path(tmp_path):
    return tmp_path / "etc" / "credential"


class TestCredentialStore:
    """CredentialStore.get lookup order"""

    def test_has(self, cred_path):
        """has() reflects the persisted file"""
        store = CredentialStore(cred_path, prompt=Prompt())
        assert not store.has()
        cred_path.parent.mkdir(parents=True)
        cred_path.write_text("x\n")
        assert store.has()

    def test_prompts_once_then_caches(self, cred_path, make_runner):
        """A verified password is cached for the rest of the process"""
        prompt = Prompt("hunter2")
        runner = make_runner([(VERIFY, accept_only("hunter2"))])
        store = CredentialStore(cred_path, prompt=prompt, runner=runner, geteuid=lambda: 1000)

        assert store.get() == "hunter2"
        assert store.get() == "hunter2"
        assert store.get() == "hunter2"
        assert prompt.count == 1

    def test_password_never_in_argv(self, cred_path, make_runner):
        """The secret only travels through stdin"""
        runner = make_runner([(VERIFY, accept_only("hunter2"))])
        store = CredentialStore(cred_path, prompt=Prompt("hunter2"), runner=runner, geteuid=lambda: 1000)
        store.get()

        for args in runner.commands:
            assert "hunter2" not in " ".join(args)
        assert "hunter2" not in repr(store)

    def test_persists_owner_only_via_sudo(self, cred_path, make_runner):
        """Non-root processes persist through sudo install with mode 600"""
        runner = make_runner([(VERIFY, accept_only("pw"))])
        store = CredentialStore(cred_path, prompt=Prompt("pw"), runner=runner, geteuid=lambda: 1000)
        store.get()

        args, stdin = runner.calls[-1]
        assert args[:5] == ["sudo", "-S", "-k", "-p", ""]
        assert args[5:] == [
            "install", "-D", "-m", "600", "-o", "root", "-g", "root",
            "/dev/stdin", str(cred_path),
        ]
        assert stdin == "pw\npw\n"

    def test_persists_owner_only_as_root(self, cred_path, make_runner):
        """Root writes the file directly with mode 600"""
        runner = make_runner([(VERIFY, accept_only("pw"))])
        store = CredentialStore(cred_path, prompt=Prompt("pw"), runner=runner, geteuid=lambda: 0)
        store.get()

        assert cred_path.read_text() == "pw\n"
        assert stat.S_IMODE(cred_path.stat().st_mode) == 0o600

    def test_reprompts_after_rejection(self, cred_path, make_runner):
        """A rejected password is asked again"""
        prompt = Prompt("wrong", "right")
        runner = make_runner([(VERIFY, accept_only("right"))])
        store = CredentialStore(cred_path, prompt=prompt, runner=runner, geteuid=lambda: 1000)

        assert store.get() == "right"
        assert prompt.count == 2

    def test_gives_up_after_max_attempts(self, cred_path, make_runner):
        """Retries are bounded"""
        prompt = Prompt("a", "b", "c", "d")
        runner = make_runner([(VERIFY, accept_only("never"))])
        store = CredentialStore(
            cred_path, prompt=prompt, runner=runner, max_attempts=3, geteuid=lambda: 1000
        )

        with pytest.raises(ElevationFailed):
            store.get()
        assert prompt.count == 3

    def test_reads_persisted_as_root(self, cred_path):
        """Root reads the file without prompting"""
        cred_path.parent.mkdir(parents=True)
        cred_path.write_text("from-disk\n")
        prompt = Prompt()
        store = CredentialStore(cred_path, prompt=prompt, geteuid=lambda: 0)

        assert store.get() == "from-disk"
        assert prompt.count == 0

    def test_reads_persisted_with_cached_sudo(self, cred_path, make_runner):
        """A passwordless sudo grant is enough to read the file"""
        cred_path.parent.mkdir(parents=True)
        cred_path.touch()
        runner = make_runner([
            (["sudo", "-n", "true"], 0),
            (["sudo", "-n", "cat"], (0, "from-sudo\n", "")),
        ])
        prompt = Prompt()
        store = CredentialStore(cred_path, prompt=prompt, runner=runner, geteuid=lambda: 1000)

        assert store.get() == "from-sudo"
        assert prompt.count == 0

    def test_unreadable_file_falls_back_to_prompt(self, cred_path, make_runner):
        """Without a sudo grant the operator is asked"""
        cred_path.parent.mkdir(parents=True)
        cred_path.touch()
        runner = make_runner([
            (["sudo", "-n", "true"], (1, "", "sudo: a password is required")),
            (VERIFY, accept_only("typed")),
        ])
        prompt = Prompt("typed")
        store = CredentialStore(cred_path, prompt=prompt, runner=runner, geteuid=lambda: 1000)

        assert store.get() == "typed"
        assert prompt.count == 1

    def test_clear_forgets_cache(self, cred_path, make_runner):
        """clear() drops the in-memory copy"""
        cred_path.parent.mkdir(parents=True)
        cred_path.write_text("one\n")
        store = CredentialStore(cred_path, prompt=Prompt(), geteuid=lambda: 0)
        assert store.get() == "one"

        cred_path.write_text("two\n")
        assert store.get() == "one"
        store.clear()
        assert store.get() == "two"
