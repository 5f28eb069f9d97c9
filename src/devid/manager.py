"""Per-account fingerprint lifecycle: backfill, regenerate, restore."""

import logging

from devid import history
from devid.errors import AccountNotFound, OutOfRange
from devid.fingerprint import FingerprintFactory

log = logging.getLogger(__name__)


class AccountFingerprintManager:
    """Owns the current fingerprint and retired history of every account.

    Accounts are kept in an in-memory index keyed by email; the store is only
    used to load and persist them. Not thread-safe: callers that share one
    manager across threads must serialise access themselves.

    With ``autosave`` every mutation is written through to the store before
    the call returns. Without it mutations only mark the manager dirty and
    ``save()`` is the flush point.
    """

    def __init__(self, store, factory=None, autosave=True):
        self.store = store
        self.factory = factory or FingerprintFactory()
        self.autosave = autosave
        self._accounts = {}
        self._dirty = False

    @property
    def dirty(self):
        return self._dirty

    def initialize(self):
        """(Re)load accounts from the store, backfilling and re-stamping fingerprints."""
        self._accounts = {}
        changed = False
        for account in self.store.load():
            self._accounts[account["email"]] = account
            if self.ensure_fingerprint(account):
                changed = True
                continue
            if self._clean_history(account):
                changed = True
            updated = self.factory.update_version(account["fingerprint"])
            if updated is not account["fingerprint"]:
                account["fingerprint"] = updated
                changed = True
        self._dirty = False
        log.info("loaded %d accounts from %s", len(self._accounts), getattr(self.store, "path", "store"))
        if changed:
            self._mark_dirty()
        return self

    def ensure_fingerprint(self, account):
        """Give ``account`` a fingerprint (and a history list) if it has none.

        Returns True when the account was changed. An existing fingerprint is
        never replaced; a value that is not a fingerprint record (a string, a
        list) counts as missing. Retired entries already on the account are kept.
        """
        fp = account.get("fingerprint")
        if isinstance(fp, dict) and fp:
            return False
        account["fingerprint"] = self.factory.generate()
        self._clean_history(account)
        log.info("backfilled fingerprint for %s", account.get("email"))
        return True

    def _clean_history(self, account):
        """Drop history entries that carry no fingerprint record. Returns True if anything changed."""
        hist = account.get("fingerprintHistory")
        if not isinstance(hist, list):
            account["fingerprintHistory"] = []
            return True
        kept = [e for e in hist if isinstance(e, dict) and isinstance(e.get("fingerprint"), dict)]
        if len(kept) == len(hist):
            return False
        log.warning("dropped %d unusable history entries for %s", len(hist) - len(kept), account.get("email"))
        account["fingerprintHistory"] = kept
        return True

    def _get(self, email):
        try:
            return self._accounts[email]
        except KeyError:
            raise AccountNotFound(email) from None

    def _mark_dirty(self):
        self._dirty = True
        if self.autosave:
            self.save()

    def save(self):
        self.store.save(self._accounts.values())
        self._dirty = False

    # ── Lookups ───────────────────────────────────────────────────────────

    def get_all_accounts(self):
        return list(self._accounts.values())

    def get_account(self, email):
        return self._get(email)

    def get_fingerprint(self, email):
        return self._get(email).get("fingerprint")

    def get_fingerprint_history(self, email):
        return list(self._get(email).get("fingerprintHistory") or [])

    def get_headers(self, email):
        return self.factory.build_headers(self.get_fingerprint(email))

    # ── Mutations ─────────────────────────────────────────────────────────

    def add_account(self, email, **fields):
        if email in self._accounts:
            return self._accounts[email]
        account = {"email": email, **fields}
        self.ensure_fingerprint(account)
        self._accounts[email] = account
        log.info("added account %s", email)
        self._mark_dirty()
        return account

    def regenerate_fingerprint(self, email):
        account = self._get(email)
        hist = account.get("fingerprintHistory") or []
        if account.get("fingerprint"):
            entry = history.make_entry(
                account["fingerprint"], history.REASON_REGENERATED, retired_at=self.factory.clock()
            )
            hist = history.push(hist, entry)
        fresh = self.factory.generate()
        account["fingerprintHistory"] = hist
        account["fingerprint"] = fresh
        log.info("regenerated fingerprint for %s -> %s", email, fresh["deviceId"])
        self._mark_dirty()
        return fresh

    def restore_fingerprint(self, email, history_index):
        account = self._get(email)
        snapshot = list(account.get("fingerprintHistory") or [])
        target = history.get(snapshot, history_index)
        if not isinstance(target, dict) or not isinstance(target.get("fingerprint"), dict):
            raise OutOfRange(history_index, len(snapshot))

        hist = snapshot
        if account.get("fingerprint"):
            retired = history.make_entry(
                account["fingerprint"], history.REASON_RESTORED, retired_at=self.factory.clock()
            )
            hist = history.push(hist, retired)
        # the push may already have evicted the target if it was the oldest entry
        hist = history.remove(hist, target)

        account["fingerprintHistory"] = hist
        account["fingerprint"] = target["fingerprint"]
        log.info("restored fingerprint %s for %s", target["fingerprint"].get("deviceId"), email)
        self._mark_dirty()
        return target["fingerprint"]
