# =============================================================================
# Pytest Configuration and Fixtures
# =============================================================================
# Shared fixtures for the mailacct test suite.
# =============================================================================

import io
import pytest
import tempfile
from pathlib import Path

import keyring
from keyring.errors import PasswordDeleteError

from mailacct.config import CredentialConfig
from mailacct.core import Account, AccountType


class FakePrompter:
    """Prompter returning canned answers and recording what it was asked."""

    def __init__(self, lines=None, passwords=None):
        self.lines = list(lines or [])
        self.passwords = list(passwords or [])
        self.calls = []

    def prompt_line(self, message, default=""):
        self.calls.append(("line", message, default))
        return self.lines.pop(0) if self.lines else None

    def prompt_password(self, message):
        self.calls.append(("password", message))
        return self.passwords.pop(0) if self.passwords else None


class FakeProcess:
    """Stands in for subprocess.Popen in refresh command tests."""

    def __init__(self, output=""):
        if isinstance(output, str):
            output = output.encode("utf-8")
        self.stdout = io.BytesIO(output)
        self.waited = False

    def wait(self):
        self.waited = True
        return 0


class FakeSpawner:
    """Records spawned commands and hands out a FakeProcess."""

    def __init__(self, output="", error=None):
        self.output = output
        self.error = error
        self.commands = []
        self.processes = []

    def __call__(self, command):
        self.commands.append(command)
        if self.error is not None:
            raise self.error
        process = FakeProcess(self.output)
        self.processes.append(process)
        return process


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def fake_keyring(monkeypatch):
    """Replace the system keyring with an in-memory dict."""
    store = {}

    def get_password(service, username):
        return store.get((service, username))

    def set_password(service, username, password):
        store[(service, username)] = password

    def delete_password(service, username):
        if (service, username) not in store:
            raise PasswordDeleteError("not found")
        del store[(service, username)]

    monkeypatch.setattr(keyring, "get_password", get_password)
    monkeypatch.setattr(keyring, "set_password", set_password)
    monkeypatch.setattr(keyring, "delete_password", delete_password)
    return store


@pytest.fixture
def config():
    """A config with a fixed system username and nothing else set."""
    return CredentialConfig(username="sysuser")


@pytest.fixture
def prompter():
    return FakePrompter()


@pytest.fixture
def imap_account():
    """A bare IMAP account with only the host known."""
    return Account(AccountType.IMAP, "imap.example.com")


@pytest.fixture
def smtp_account():
    return Account(AccountType.SMTP, "smtp.example.com")
