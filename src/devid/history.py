"""Bounded, most-recent-first log of retired fingerprints."""

import time

from devid.errors import OutOfRange

MAX_FINGERPRINT_HISTORY = 5

REASON_REGENERATED = "regenerated"
REASON_RESTORED = "restored"
REASON_MIGRATED = "migrated"


def make_entry(fingerprint, reason, retired_at=None):
    if retired_at is None:
        retired_at = int(time.time() * 1000)
    return {"fingerprint": fingerprint, "reason": reason, "retiredAt": retired_at}


def push(history, entry):
    """Return a new history with ``entry`` in front, oldest entries dropped past the cap."""
    return [entry, *history][:MAX_FINGERPRINT_HISTORY]


def get(history, index):
    # bool is an int subclass but never a valid position
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(history):
        raise OutOfRange(index, len(history))
    return history[index]


def remove(history, entry):
    """Return a new history without ``entry`` (matched by identity, not value)."""
    return [e for e in history if e is not entry]
