"""Click CLI for device fingerprints - inspect, regenerate and restore per account."""

import logging
import sys

import click

from devid.account_store import AccountStore
from devid.client import FingerprintClient
from devid.config import resolve_accounts_path
from devid.errors import DevidError
from devid.manager import AccountFingerprintManager
from devid.output import (
    format_account,
    format_fingerprint,
    format_history_entry,
    print_account_text,
    print_error,
    print_fingerprint_text,
    print_headers_text,
    print_history_text,
    print_info,
    print_json,
    print_success,
)


@click.group()
@click.option("--json", "use_json", is_flag=True, help="Output as JSON")
@click.option("--accounts", "accounts_path", default=None, type=click.Path(dir_okay=False),
              help="Account store file (default: $DEVID_ACCOUNTS_PATH or ~/.config/devid/accounts.json)")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx, use_json, accounts_path, verbose):
    """Device fingerprints - per-account identities for outbound API calls."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj["json"] = use_json
    ctx.obj["accounts_path"] = accounts_path
    ctx.obj["_manager"] = None


def _get_manager(ctx):
    """Lazy manager creation: only touches the store when a command actually runs."""
    if ctx.obj["_manager"] is None:
        store = AccountStore(resolve_accounts_path(ctx.obj["accounts_path"]))
        ctx.obj["_manager"] = _run(AccountFingerprintManager(store).initialize)
    return ctx.obj["_manager"]


def _run(fn, *args):
    try:
        return fn(*args)
    except DevidError as e:
        print_error(str(e))
        sys.exit(1)


# ── list ────────────────────────────────────────────────────────────────────

@cli.command("list")
@click.pass_context
def list_accounts(ctx):
    """List accounts and their current fingerprints."""
    manager = _get_manager(ctx)
    accounts = manager.get_all_accounts()

    if ctx.obj["json"]:
        print_json([format_account(a) for a in accounts])
    else:
        print(f"{len(accounts)} accounts in {manager.store.path}")
        print("─" * 60)
        for a in accounts:
            print_account_text(a)


# ── add ─────────────────────────────────────────────────────────────────────

@cli.command()
@click.argument("email")
@click.pass_context
def add(ctx, email):
    """Add an account with a fresh fingerprint."""
    manager = _get_manager(ctx)
    account = _run(manager.add_account, email)

    if ctx.obj["json"]:
        print_json(format_account(account))
    else:
        print_success(f"Account ready: {email}")
        print_fingerprint_text(account["fingerprint"])


# ── show ────────────────────────────────────────────────────────────────────

@cli.command()
@click.argument("email")
@click.pass_context
def show(ctx, email):
    """Show the current fingerprint of an account."""
    fp = _run(_get_manager(ctx).get_fingerprint, email)

    if ctx.obj["json"]:
        print_json(format_fingerprint(fp))
    else:
        print_fingerprint_text(fp, title=email)


# ── headers ─────────────────────────────────────────────────────────────────

@cli.command()
@click.argument("email")
@click.pass_context
def headers(ctx, email):
    """Print the request headers derived from an account's fingerprint."""
    result = _run(_get_manager(ctx).get_headers, email)

    if ctx.obj["json"]:
        print_json(result)
    else:
        print_headers_text(result)


# ── history ─────────────────────────────────────────────────────────────────

@cli.command()
@click.argument("email")
@click.pass_context
def history(ctx, email):
    """Show retired fingerprints, most recent first."""
    entries = _run(_get_manager(ctx).get_fingerprint_history, email)

    if ctx.obj["json"]:
        print_json([format_history_entry(i, e) for i, e in enumerate(entries)])
    else:
        print(f"Fingerprint history for {email} ({len(entries)})")
        print("─" * 60)
        print_history_text(entries)


# ── regenerate ──────────────────────────────────────────────────────────────

@cli.command()
@click.argument("email")
@click.pass_context
def regenerate(ctx, email):
    """Retire the current fingerprint and generate a new one."""
    fp = _run(_get_manager(ctx).regenerate_fingerprint, email)

    if ctx.obj["json"]:
        print_json({"status": "ok", "email": email, "fingerprint": format_fingerprint(fp)})
    else:
        print_success(f"New fingerprint for {email}")
        print_fingerprint_text(fp)


# ── restore ─────────────────────────────────────────────────────────────────

@cli.command()
@click.argument("email")
@click.argument("index", type=int)
@click.pass_context
def restore(ctx, email, index):
    """Bring back the fingerprint at INDEX in the history."""
    fp = _run(_get_manager(ctx).restore_fingerprint, email, index)

    if ctx.obj["json"]:
        print_json({"status": "ok", "email": email, "fingerprint": format_fingerprint(fp)})
    else:
        print_success(f"Restored fingerprint {fp['deviceId']} for {email}")
        print_fingerprint_text(fp)


# ── check ───────────────────────────────────────────────────────────────────

@cli.command()
@click.argument("email")
@click.argument("url")
@click.option("--timeout", default=30, help="Request timeout in seconds")
@click.pass_context
def check(ctx, email, url, timeout):
    """Send a GET to URL under the account's fingerprint and report the status."""
    manager = _get_manager(ctx)
    _run(manager.get_account, email)
    client = FingerprintClient(manager, email, timeout=timeout)
    try:
        resp = client.get(url)
    except Exception as e:
        if ctx.obj["json"]:
            print_json({"status": "error", "url": url, "error": str(e)})
        else:
            print_error(f"Request failed: {e}")
        sys.exit(1)
    finally:
        client.close()

    if ctx.obj["json"]:
        print_json({"status": "ok", "url": url, "http_status": resp.status_code})
    else:
        print_success(f"{resp.status_code} {url}")
        print_info(f"as {manager.get_fingerprint(email)['deviceId']}")


def main():
    cli()
