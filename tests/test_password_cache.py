import keyring
import pytest
from keyring.backend import KeyringBackend
from keyring.errors import PasswordDeleteError

from adapters.password_cache import KeyringPasswordCache


class MemoryKeyring(KeyringBackend):
    priority = 1

    def __init__(self):
        super().__init__()
        self.store = {}

    def get_password(self, service, username):
        return self.store.get((service, username))

    def set_password(self, service, username, password):
        self.store[(service, username)] = password

    def delete_password(self, service, username):
        if (service, username) not in self.store:
            raise PasswordDeleteError(username)
        del self.store[(service, username)]


@pytest.fixture
def memory_keyring():
    previous = keyring.get_keyring()
    backend = MemoryKeyring()
    keyring.set_keyring(backend)
    yield backend
    keyring.set_keyring(previous)


class Clock:
    def __init__(self):
        self.now = 1_000.0

    def __call__(self):
        return self.now


def test_entries_expire(memory_keyring):
    clock = Clock()
    cache = KeyringPasswordCache("test-cache", clock=clock)

    cache.put("abc", "pw", timeout=10)
    assert cache.get("abc") == "pw"

    clock.now += 11
    assert cache.get("abc") is None
    assert memory_keyring.store == {}


def test_zero_timeout_is_not_stored(memory_keyring):
    cache = KeyringPasswordCache("test-cache")
    cache.put("abc", "pw", timeout=0)

    assert memory_keyring.store == {}


def test_malformed_entry_is_dropped(memory_keyring):
    memory_keyring.set_password("test-cache", "abc", "not json")

    assert KeyringPasswordCache("test-cache").get("abc") is None
    assert memory_keyring.store == {}
