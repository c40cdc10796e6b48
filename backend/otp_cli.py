#!/usr/bin/env python3
"""
otp_cli.py — command line front end for the account store and OTP core

Subcommands:
- code    : one-shot code for a Base32 secret (optionally at a given time)
- add     : store an account (name + secret)
- list    : print every account with its current code
- rename  : rename an account
- delete  : delete an account
- watch   : show codes in real time (Ctrl+C to quit)
- notify  : run the notification scheduler in the foreground
- enable / disable : turn periodic notifications on or off
- theme   : toggle dark mode
"""

import argparse
import logging
import sys
import time

from core import (
    DEFAULT_TIME_STEP,
    OTPError,
    generate,
    generate_codes,
    get_provider,
    now,
    seconds_remaining,
)
from core.otp_core import time_counter
from database import db_manager

from .config import Config, configure_logging
from .notifier import NotificationScheduler

logger = logging.getLogger(__name__)


def _provider(args):
    return get_provider(args.provider)


def _print_codes(args, timestamp):
    accounts = db_manager.list_accounts(args.db)
    if not accounts:
        print("No accounts. Add one with: authnotify add NAME SECRET")
        return []
    results = generate_codes(accounts, timestamp, args.period, _provider(args))
    for r in results:
        if r.ok:
            print(f"[{r.account_id:3d}] {r.name}: {r.code}")
        else:
            print(f"[{r.account_id:3d}] {r.name}: code generation error ({r.error})")
    return results


# --- CLI command handlers ---
def cmd_code(args):
    timestamp = now() if args.time is None else args.time
    code = generate(args.secret, timestamp, args.period, _provider(args))
    print(code)


def cmd_add(args):
    ok, result = db_manager.add_account(args.name, args.secret, args.db, provider=_provider(args))
    if not ok:
        print(f"[!] {result}")
        return 1
    print(f"[+] Account '{args.name.strip()}' added (id={result})")


def cmd_list(args):
    timestamp = now()
    if _print_codes(args, timestamp):
        print(f"\n(valid ~{seconds_remaining(timestamp, args.period)}s)")


def cmd_rename(args):
    try:
        renamed = db_manager.rename_account(args.id, args.name, args.db)
    except KeyError:
        print(f"[!] Account {args.id} not found")
        return 1
    print("[+] Renamed" if renamed else "[*] Name unchanged")


def cmd_delete(args):
    if not db_manager.delete_account(args.id, args.db):
        print(f"[!] Account {args.id} not found")
        return 1
    print(f"[+] Account {args.id} deleted")


def cmd_watch(args):
    print("Press Ctrl+C to quit. Generating codes in real time...\n")
    last_counter = None
    try:
        while True:
            timestamp = now()
            counter = time_counter(timestamp, args.period)
            if counter != last_counter:
                _print_codes(args, timestamp)
                last_counter = counter
            else:
                print(f".. {seconds_remaining(timestamp, args.period):2d}s left", end='\r', flush=True)
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nBye.")


def cmd_notify(args):
    settings = db_manager.get_settings(args.db)
    scheduler = NotificationScheduler(
        load_accounts=lambda: db_manager.list_accounts(args.db),
        interval=args.interval or settings.interval,
        time_step=args.period,
        provider=_provider(args),
        clock=now,
    )
    if args.once:
        message = scheduler.send_notification()
        if message is None:
            print("[*] Nothing to notify")
        return
    print(f"Sending notifications every {scheduler.interval}s. Press Ctrl+C to quit.")
    try:
        scheduler.run_forever()
    except KeyboardInterrupt:
        print("\nBye.")


def cmd_enable(args):
    db_manager.update_settings(args.db, enabled=True)
    print("[+] Notifications enabled")


def cmd_disable(args):
    db_manager.update_settings(args.db, enabled=False)
    print("[+] Notifications disabled")


def cmd_theme(args):
    dark = db_manager.toggle_dark_mode(args.db)
    print(f"[+] Theme: {'dark' if dark else 'light'}")


def cmd_help(args):
    print("'authnotify -h' for help.")


# --- Argparse builder ---
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="authnotify", description="TOTP authenticator (HMAC-SHA1, 6 digits)")
    p.add_argument("--db", default=Config.DATABASE_FILE, help="SQLite database file")
    p.add_argument("--period", type=int, default=DEFAULT_TIME_STEP, help="TOTP time step (seconds)")
    p.add_argument("--provider", default=Config.HASH_PROVIDER, help="Hash provider: hmac or cryptography")
    p.add_argument("--verbose", action="store_true", help="Verbose (DEBUG) logging")
    sub = p.add_subparsers(dest="cmd")
    p.set_defaults(func=cmd_help)

    pc = sub.add_parser("code", help="Print the code for a Base32 secret")
    pc.add_argument("secret", help="Base32 secret")
    pc.add_argument("--time", type=int, help="Unix time to use instead of now")
    pc.set_defaults(func=cmd_code)

    pa = sub.add_parser("add", help="Add an account")
    pa.add_argument("name", help="Account display name")
    pa.add_argument("secret", help="Base32 secret (spaces allowed)")
    pa.set_defaults(func=cmd_add)

    pl = sub.add_parser("list", help="List accounts with current codes")
    pl.set_defaults(func=cmd_list)

    pr = sub.add_parser("rename", help="Rename an account")
    pr.add_argument("id", type=int)
    pr.add_argument("name")
    pr.set_defaults(func=cmd_rename)

    pd = sub.add_parser("delete", help="Delete an account")
    pd.add_argument("id", type=int)
    pd.set_defaults(func=cmd_delete)

    pw = sub.add_parser("watch", help="Show codes in real time")
    pw.set_defaults(func=cmd_watch)

    pn = sub.add_parser("notify", help="Run periodic notifications in the foreground")
    pn.add_argument("--interval", type=int, help="Seconds between notifications (default: settings)")
    pn.add_argument("--once", action="store_true", help="Send a single notification and exit")
    pn.set_defaults(func=cmd_notify)

    sub.add_parser("enable", help="Enable notifications").set_defaults(func=cmd_enable)
    sub.add_parser("disable", help="Disable notifications").set_defaults(func=cmd_disable)
    sub.add_parser("theme", help="Toggle dark mode").set_defaults(func=cmd_theme)

    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging("DEBUG" if args.verbose else Config.LOG_LEVEL)
    db_manager.init_db(args.db)
    logger.debug("Using database %s", args.db)
    try:
        return args.func(args) or 0
    except (OTPError, ValueError) as e:
        print(f"[!] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
