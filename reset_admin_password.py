#!/usr/bin/env python3
"""
Reset an administrator's password in the FameFlow SQLite database.

This script does not read or reveal any existing password.  It stores a
new salted hash (PBKDF2-HMAC-SHA256, format "salthex$hashhex") for the
given administrator email.

Usage:
    python reset_admin_password.py --db ./fameflow.db --email admin@fameflow.com --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sys

from fameflow_api.app.core.db import Database
from fameflow_api.app.services.admin_service import AdminService


def main() -> None:
    ap = argparse.ArgumentParser(description="Reset a FameFlow administrator password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./fameflow.db)")
    ap.add_argument("--email", required=True, help="Administrator email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args()

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        sys.exit(1)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        sys.exit(1)

    service = AdminService(Database(os.path.abspath(args.db)))
    if not service.set_password(args.email, new_password):
        print(f"[!] No administrator found with email: {args.email}", file=sys.stderr)
        sys.exit(2)
    print(f"[+] Password updated for administrator: {args.email}")


if __name__ == "__main__":
    main()
