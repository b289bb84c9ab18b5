# -*- coding: utf-8 -*-
"""
CLI tool for managing the spreadsheet.

Usage:
    python -m backend.cli init
    python -m backend.cli dump <sheet>
    python -m backend.cli check
    python -m backend.cli create-admin <username> <email> <password>
"""

from __future__ import annotations

import argparse
import json
import sys

from .sheets.errors import RecordStoreError


def cmd_init(args: argparse.Namespace) -> int:
    """Create missing worksheets with their header rows."""
    from .app_db import init_app_db

    created = init_app_db()
    for name, was_created in created.items():
        print(f"{name}: {'created' if was_created else 'ok'}")
    return 0


def cmd_dump(args: argparse.Namespace) -> int:
    """Print every record of a sheet as JSON lines."""
    from .app_db import get_store

    for record in get_store(args.sheet).list_all():
        print(json.dumps(record, ensure_ascii=False, default=str))
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Report header mismatches and duplicate ids."""
    from collections import Counter

    from .app_db import get_storage
    from .sheets.mapper import SCHEMAS, header_of, parse_int

    storage = get_storage()
    problems = 0
    for name, schema in SCHEMAS.items():
        rows = storage.read_all(name)
        header = header_of(rows)
        if header != schema.header:
            print(f"{name}: header {header} != expected {schema.header}")
            problems += 1
        if "id" not in header:
            continue
        id_idx = header.index("id")
        ids = [parse_int(r[id_idx]) if id_idx < len(r) else None for r in rows[1:]]
        dupes = sorted(i for i, n in Counter(ids).items() if i is not None and n > 1)
        if dupes:
            print(f"{name}: duplicate ids {dupes}")
            problems += 1
        blanks = sum(1 for i in ids if i is None)
        if blanks:
            print(f"{name}: {blanks} row(s) without a numeric id")
            problems += 1
    if not problems:
        print("All sheets look consistent")
    return 1 if problems else 0


def cmd_create_admin(args: argparse.Namespace) -> int:
    """Create an admin user (register only creates clients)."""
    from .auth.security import ROLE_ADMIN, hash_password
    from .auth.storage import create_user

    user = create_user(
        username=args.username,
        email=args.email,
        password_hash=hash_password(args.password),
        full_name=args.full_name or "",
        role=ROLE_ADMIN,
    )
    print(f"Created admin id={user['id']} email={user['email']}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Nutri-Web spreadsheet CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("init", help="Create missing sheets with headers")

    dump_parser = subparsers.add_parser("dump", help="Dump a sheet as JSON lines")
    dump_parser.add_argument("sheet", help="Sheet name, e.g. products")

    subparsers.add_parser("check", help="Check headers and id uniqueness")

    admin_parser = subparsers.add_parser("create-admin", help="Create an admin user")
    admin_parser.add_argument("username")
    admin_parser.add_argument("email")
    admin_parser.add_argument("password")
    admin_parser.add_argument("--full-name", default="")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "init": cmd_init,
        "dump": cmd_dump,
        "check": cmd_check,
        "create-admin": cmd_create_admin,
    }

    try:
        return commands[args.command](args)
    except RecordStoreError as exc:
        print(f"Error: {exc}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
