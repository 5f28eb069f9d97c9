"""Settings resolution: load store path and product version from env or .env file."""

import os
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_ACCOUNTS_PATH = Path.home() / ".config" / "devid" / "accounts.json"
DEFAULT_PRODUCT_VERSION = "1.15.8"

_loaded = False


def _find_env():
    cwd = Path.cwd()
    for d in [cwd, *cwd.parents]:
        candidate = d / ".env"
        if candidate.exists():
            return candidate
    pkg_env = Path(__file__).resolve().parent.parent.parent / ".env"
    if pkg_env.exists():
        return pkg_env
    return None


def _load_env():
    global _loaded
    if _loaded:
        return
    env_path = _find_env()
    if env_path:
        load_dotenv(env_path)
    _loaded = True


def resolve_accounts_path(override=None):
    """Return the account store path: explicit override, then DEVID_ACCOUNTS_PATH, then the default."""
    if override:
        return Path(override).expanduser()
    _load_env()
    env_value = os.getenv("DEVID_ACCOUNTS_PATH")
    if env_value:
        return Path(env_value).expanduser()
    return DEFAULT_ACCOUNTS_PATH


def resolve_product_version():
    _load_env()
    return os.getenv("DEVID_PRODUCT_VERSION") or DEFAULT_PRODUCT_VERSION
