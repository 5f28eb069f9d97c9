"""Persist account records (with their fingerprints) to a JSON file across runs."""

import json
import logging
import os
import tempfile
from pathlib import Path

from devid.errors import AccountStoreError

log = logging.getLogger(__name__)


class AccountStore:
    """JSON file of the form ``{"accounts": [...], "settings": {...}}``.

    Every ``load`` re-reads the file. ``save`` rewrites the whole document
    atomically; concurrent writers are not coordinated (last one wins).
    Records without an email are not handed out but are written back
    unchanged after the accounts on every save.
    """

    def __init__(self, path):
        self.path = Path(path)
        self.settings = {}
        self.unkeyed = []

    def _read(self):
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise AccountStoreError(f"Cannot read account store {self.path}: {e}") from e
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise AccountStoreError(f"Account store {self.path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise AccountStoreError(f"Account store {self.path} must contain a JSON object")
        return data

    def load(self):
        data = self._read()
        if data is None:
            log.debug("no account store at %s, starting empty", self.path)
            self.settings = {}
            self.unkeyed = []
            return []
        accounts = data.get("accounts") or []
        if not isinstance(accounts, list):
            raise AccountStoreError(f"'accounts' in {self.path} must be a list")
        self.settings = data.get("settings") or {}

        keyed, self.unkeyed, seen = [], [], set()
        for record in accounts:
            if not isinstance(record, dict) or not isinstance(record.get("email"), str) or not record["email"]:
                self.unkeyed.append(record)
                continue
            if record["email"] in seen:
                raise AccountStoreError(f"Duplicate account {record['email']} in {self.path}")
            seen.add(record["email"])
            keyed.append(record)
        if self.unkeyed:
            log.warning("%d account records in %s have no email and are left as-is", len(self.unkeyed), self.path)
        return keyed

    def save(self, accounts):
        doc = {"accounts": [*accounts, *self.unkeyed], "settings": self.settings}
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".accounts-", suffix=".tmp", dir=self.path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(json.dumps(doc, indent=2) + "\n")
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise AccountStoreError(f"Cannot write account store {self.path}: {e}") from e
        log.debug("saved %d accounts to %s", len(doc["accounts"]), self.path)
