"""Formatted and JSON output for accounts, fingerprints and history. ANSI colors, no external libs."""

import json
import sys
from datetime import datetime, timezone

# ANSI escape codes
BOLD = "\033[1m"
RESET = "\033[0m"
CYAN = "\033[36m"
BLUE = "\033[34m"
GREEN = "\033[32m"
RED = "\033[31m"
YELLOW = "\033[33m"
DIM = "\033[2m"


def _ts(epoch_ms):
    if not epoch_ms:
        return "?"
    dt = datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc)
    return dt.strftime("%Y-%m-%d %H:%M UTC")


# ── JSON-mode formatters (return dicts) ─────────────────────────────────────

def format_fingerprint(fp):
    if not fp:
        return None
    meta = fp.get("clientMetadata") or {}
    return {
        "device_id": fp.get("deviceId", ""),
        "user_agent": fp.get("userAgent", ""),
        "api_client": fp.get("apiClient", ""),
        "quota_user": fp.get("quotaUser", ""),
        "platform": meta.get("platform", ""),
        "arch": meta.get("arch", ""),
        "os_version": meta.get("osVersion", ""),
        "ide_type": meta.get("ideType", ""),
        "created": _ts(fp.get("createdAt")),
    }


def format_history_entry(index, entry):
    return {
        "index": index,
        "reason": entry.get("reason", ""),
        "retired": _ts(entry.get("retiredAt")),
        "fingerprint": format_fingerprint(entry.get("fingerprint")),
    }


def format_account(account):
    return {
        "email": account.get("email", ""),
        "fingerprint": format_fingerprint(account.get("fingerprint")),
        "history": len(account.get("fingerprintHistory") or []),
    }


# ── Text-mode printers (write to stdout) ────────────────────────────────────

def print_fingerprint_text(fp, title=None):
    d = format_fingerprint(fp)
    if title:
        print(f"{BOLD}{title}{RESET}")
    if d is None:
        print(f"  {DIM}(no fingerprint){RESET}")
        return
    print(f"  device:   {CYAN}{d['device_id']}{RESET}")
    print(f"  agent:    {d['user_agent']}")
    print(f"  client:   {d['api_client']}")
    print(f"  quota:    {d['quota_user']}")
    print(f"  platform: {d['platform']} {d['os_version']} {d['arch']} | {d['ide_type']}")
    print(f"  created:  {d['created']}")


def print_history_text(entries):
    if not entries:
        print(f"{DIM}No fingerprint history{RESET}")
        return
    for i, entry in enumerate(entries):
        d = format_history_entry(i, entry)
        fp = d["fingerprint"] or {}
        print(f"  [{i}] {YELLOW}{d['reason']}{RESET} {d['retired']}")
        print(f"      {CYAN}{fp.get('device_id', '')}{RESET} {fp.get('user_agent', '')}")


def print_account_text(account):
    d = format_account(account)
    fp = d["fingerprint"] or {}
    print(f"{BOLD}{d['email']}{RESET}")
    print(f"  {CYAN}{fp.get('device_id', '-')}{RESET} | {fp.get('user_agent', '-')} | history {d['history']}")


def print_headers_text(headers):
    for name, value in headers.items():
        print(f"{BLUE}{name}{RESET}: {value}")


# ── Utility printers ────────────────────────────────────────────────────────

def print_json(data):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def print_success(msg):
    print(f"{GREEN}{msg}{RESET}")


def print_error(msg):
    print(f"{RED}{msg}{RESET}", file=sys.stderr)


def print_info(msg):
    print(f"{DIM}{msg}{RESET}")
