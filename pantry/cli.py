#!/usr/bin/env python
"""Command-line front end for the pantry ledger."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, TextIO

from .catalog import CatalogView
from .config import load_settings
from .errors import PantryError
from .results import LedgerResult, Outcome
from .service import open_pantry

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_FOUND = 2


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pantry",
        description="Track household items, their quantities and expiration dates.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Add units of an item, creating it if needed")
    add.add_argument("name")
    add.add_argument("-n", "--quantity", type=int, default=1, help="Units to add (default 1)")
    add.add_argument("--expires", default=None, help="Expiration date (YYYY-MM-DD)")

    remove = sub.add_parser("remove", help="Remove one unit of an item")
    remove.add_argument("name")

    set_ = sub.add_parser("set", help="Set the quantity of an existing item (0 deletes it)")
    set_.add_argument("name")
    set_.add_argument("quantity", type=int)
    set_.add_argument("--expires", default=None, help="Expiration date (YYYY-MM-DD)")

    rename = sub.add_parser("rename", help="Rename an item, optionally changing its quantity")
    rename.add_argument("old_name")
    rename.add_argument("new_name")
    rename.add_argument("-n", "--quantity", type=int, default=None)
    rename.add_argument("--expires", default=None, help="Expiration date (YYYY-MM-DD)")

    delete = sub.add_parser("delete", help="Delete an item")
    delete.add_argument("name")

    list_ = sub.add_parser("list", help="List items, optionally filtered by name")
    list_.add_argument("filter", nargs="?", default="")

    return parser.parse_args(argv)


def _print_result(result: LedgerResult, out: TextIO) -> int:
    print(result.message, file=out)
    if result.record is not None:
        print(f"  {result.record.display_name}: {result.record.quantity}", file=out)
    if result.outcome is Outcome.SUCCESS:
        return EXIT_OK
    if result.outcome is Outcome.NOT_FOUND:
        return EXIT_NOT_FOUND
    return EXIT_ERROR


def _print_listing(catalog: CatalogView, filter_text: str, out: TextIO) -> int:
    entries = catalog.list(filter_text)
    if not entries:
        print("No items found.", file=out)
        return EXIT_OK
    width = max(len(entry.display_name) for entry in entries)
    for entry in entries:
        print(f"{entry.display_name:<{width}}  {entry.quantity:>5}  {entry.expires_in}", file=out)
    return EXIT_OK


def main(argv: List[str] | None = None, *, out: TextIO | None = None) -> int:
    args = _parse_args(argv)
    out = out or sys.stdout
    try:
        settings = load_settings()
    except ValueError as exc:
        print(f"[FATAL] {exc}", file=sys.stderr)
        return EXIT_ERROR
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        pantry = open_pantry(settings)
    except PantryError as exc:
        print(f"[FATAL] {exc}", file=sys.stderr)
        return EXIT_ERROR

    with pantry:
        ledger = pantry.ledger
        if args.command == "add":
            return _print_result(ledger.add_item(args.name, args.quantity, args.expires), out)
        if args.command == "remove":
            return _print_result(ledger.remove_one(args.name), out)
        if args.command == "set":
            return _print_result(ledger.set_quantity(args.name, args.quantity, args.expires), out)
        if args.command == "rename":
            return _print_result(
                ledger.rename(args.old_name, args.new_name, args.quantity, args.expires), out
            )
        if args.command == "delete":
            return _print_result(ledger.delete_item(args.name), out)
        try:
            return _print_listing(pantry.catalog, args.filter, out)
        except PantryError as exc:
            print(f"[ERROR] {exc}", file=sys.stderr)
            return EXIT_ERROR


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    raise SystemExit(main())
