"""Shared fixtures: seeded factories, temporary account stores, managers."""

import json
import random

import pytest

from devid.account_store import AccountStore
from devid.fingerprint import FingerprintFactory
from devid.manager import AccountFingerprintManager

VERSION = "1.15.8"
EMAIL = "test@example.com"


class StepClock:
    """Deterministic millisecond clock that advances on every call."""

    def __init__(self, start=1_700_000_000_000):
        self.now = start

    def __call__(self):
        self.now += 1000
        return self.now


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    monkeypatch.delenv("DEVID_ACCOUNTS_PATH", raising=False)
    monkeypatch.delenv("DEVID_PRODUCT_VERSION", raising=False)


@pytest.fixture
def factory():
    return FingerprintFactory(rng=random.Random(1234), clock=StepClock(), version=VERSION)


@pytest.fixture
def accounts_path(tmp_path):
    return tmp_path / "accounts.json"


def write_accounts(path, accounts, settings=None):
    path.write_text(json.dumps({"accounts": accounts, "settings": settings or {}}))


@pytest.fixture
def seeded_store(accounts_path):
    """Store file holding one account with no fingerprint (pre-fingerprint format)."""
    write_accounts(accounts_path, [{"email": EMAIL, "source": "manual", "apiKey": "key", "enabled": True}])
    return AccountStore(accounts_path)


@pytest.fixture
def manager(seeded_store, factory):
    return AccountFingerprintManager(seeded_store, factory=factory).initialize()
