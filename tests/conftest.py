import io
import sys
from pathlib import Path

import pytest

from adapters.crypto_engine import AesGcmCryptoService
from cli.main import main
from cli.parser import build_command, parse_options
from core.config import AppSettings
from core.domain.errors import InteractiveAbort
from core.services.commands import Services


class FakePrompt:
    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    def prompt_secret(self, label, *, confirm=False):
        self.calls.append((label, confirm))
        if not self.responses:
            raise InteractiveAbort(label.lower())
        return self.responses.pop(0)


class FakeKeychain:
    def __init__(self, entries=None):
        self.entries = dict(entries or {})

    def read(self, label):
        return self.entries.get(label)

    def write(self, label, key):
        self.entries[label] = key


class FakeEditor:
    def __init__(self, new_content=None):
        self.new_content = new_content
        self.seen = []

    def edit(self, path):
        self.seen.append(Path(path).read_bytes())
        if self.new_content is not None:
            Path(path).write_bytes(self.new_content)


class FakePasswordCache:
    def __init__(self):
        self.entries = {}

    def get(self, fingerprint):
        return self.entries.get(fingerprint)

    def put(self, fingerprint, password, *, timeout):
        self.entries[fingerprint] = password


@pytest.fixture
def crypto():
    return AesGcmCryptoService(iterations=1_000)


@pytest.fixture
def prompt():
    return FakePrompt()


@pytest.fixture
def keychain():
    return FakeKeychain()


@pytest.fixture
def editor():
    return FakeEditor()


@pytest.fixture
def password_cache():
    return FakePasswordCache()


@pytest.fixture
def services(crypto, prompt, keychain, editor, password_cache):
    return Services(
        crypto=crypto,
        prompt=prompt,
        editor=editor,
        keychain=keychain,
        password_cache=password_cache,
    )


@pytest.fixture
def settings():
    return AppSettings(_env_file=None, keychain_enabled=True, no_color=True)


@pytest.fixture
def run_cli(services, settings):
    def _run(*argv, keychain=True):
        return main(list(argv), settings=settings, services=services, keychain=keychain)

    return _run


@pytest.fixture
def parse():
    def _parse(*argv, keychain=True):
        return parse_options(list(argv), command=build_command(keychain=keychain))

    return _parse


@pytest.fixture
def stdin_bytes(monkeypatch):
    def _set(data: bytes):
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data)))

    return _set
