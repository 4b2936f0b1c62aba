from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from categorizable.app import (
    OwnerFilter,
    categorize_owner,
    create_category,
    create_owner,
    filter_owners,
    list_categories,
    owner_categories,
    remove_owner,
)
from categorizable.config import ConfigurationError, configure_logging
from categorizable.domain.errors import ClassificationError
from categorizable.domain.model import OWNER_CLASS_BY_TYPE, CategorizeMode, KeyColumn

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

log = logging.getLogger(__name__)

OWNER_TYPES = sorted(OWNER_CLASS_BY_TYPE)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Tag articles and products with categories")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    category_add = subparsers.add_parser("category-add", help="Create a category")
    category_add.add_argument("name", help="Display name of the category")
    category_add.add_argument("--slug", help="Explicit slug (derived from the name otherwise)")

    subparsers.add_parser("category-list", help="List all categories")

    owner_add = subparsers.add_parser("owner-add", help="Create an article or product")
    owner_add.add_argument("owner_type", choices=OWNER_TYPES)
    owner_add.add_argument("label", help="Article title or product name")
    owner_add.add_argument("--sku", help="Product SKU")
    owner_add.add_argument(
        "--categories",
        nargs="*",
        default=None,
        help="Categories (ids or slugs) attached once the owner is created",
    )

    owner_remove = subparsers.add_parser("owner-remove", help="Delete an owner")
    owner_remove.add_argument("owner_type", choices=OWNER_TYPES)
    owner_remove.add_argument("owner_id", type=int)

    for mode in CategorizeMode:
        mutate = subparsers.add_parser(
            mode.value, help=f"{mode.value.capitalize()} categories on an owner"
        )
        mutate.add_argument("owner_type", choices=OWNER_TYPES)
        mutate.add_argument("owner_id", type=int)
        mutate.add_argument(
            "categories",
            nargs="*" if mode is CategorizeMode.SYNC else "+",
            help="Category ids or slugs (do not mix the two)",
        )

    show = subparsers.add_parser("show", help="Show the categories of an owner")
    show.add_argument("owner_type", choices=OWNER_TYPES)
    show.add_argument("owner_id", type=int)
    show.add_argument(
        "--key-column",
        choices=[column.value for column in KeyColumn],
        default=KeyColumn.SLUG.value,
    )

    filter_parser = subparsers.add_parser("filter", help="List owners by category membership")
    filter_parser.add_argument("owner_type", choices=OWNER_TYPES)
    filter_parser.add_argument("--all", nargs="+", dest="with_all", help="Owners having all")
    filter_parser.add_argument("--any", nargs="+", dest="with_any", help="Owners having any")
    filter_parser.add_argument("--without", nargs="+", help="Owners having none of these")
    filter_parser.add_argument(
        "--uncategorized", action="store_true", help="Owners without any category"
    )
    filter_parser.add_argument(
        "--column",
        choices=[column.value for column in KeyColumn],
        default=KeyColumn.SLUG.value,
        help="Category column the values are matched against",
    )

    return parser.parse_args(list(argv))


def parse_category_tokens(tokens: Sequence[str] | None) -> list[int | str] | None:
    """Read command line tokens as category ids (all digits) or slugs."""

    if tokens is None:
        return None
    return [int(token) if token.isdigit() else token for token in tokens]


def _run_category_add(args: argparse.Namespace) -> None:
    category = create_category(args.name, slug=args.slug)
    print(f"{category.id}\t{category.slug}\t{category.name}")  # noqa: T201


def _run_category_list(args: argparse.Namespace) -> None:
    _ = args
    for category in list_categories():
        print(f"{category.id}\t{category.slug}\t{category.name}")  # noqa: T201


def _run_owner_add(args: argparse.Namespace) -> None:
    fields: dict[str, object]
    if args.owner_type == "article":
        fields = {"title": args.label}
    else:
        fields = {"name": args.label, "sku": args.sku}
    owner = create_owner(
        args.owner_type,
        categories=parse_category_tokens(args.categories),
        **fields,
    )
    print(owner.id)  # noqa: T201


def _run_owner_remove(args: argparse.Namespace) -> None:
    remove_owner(args.owner_type, args.owner_id)


def _run_mutation(args: argparse.Namespace) -> None:
    changes = categorize_owner(
        args.owner_type,
        args.owner_id,
        parse_category_tokens(args.categories),
        mode=CategorizeMode(args.command),
    )
    print(f"attached={list(changes.attached)} detached={list(changes.detached)}")  # noqa: T201


def _run_show(args: argparse.Namespace) -> None:
    listing = owner_categories(
        args.owner_type, args.owner_id, key_column=KeyColumn(args.key_column)
    )
    for key, name in listing.items():
        print(f"{key}\t{name}")  # noqa: T201


def _run_filter(args: argparse.Namespace) -> None:
    owner_filter = OwnerFilter(
        with_all=parse_category_tokens(args.with_all),
        with_any=parse_category_tokens(args.with_any),
        without=parse_category_tokens(args.without),
        uncategorized=args.uncategorized,
        column=KeyColumn(args.column),
    )
    for owner in filter_owners(args.owner_type, owner_filter):
        print(owner.id)  # noqa: T201


_COMMANDS: dict[str, Callable[[argparse.Namespace], None]] = {
    "category-add": _run_category_add,
    "category-list": _run_category_list,
    "owner-add": _run_owner_add,
    "owner-remove": _run_owner_remove,
    CategorizeMode.ATTACH.value: _run_mutation,
    CategorizeMode.SYNC.value: _run_mutation,
    CategorizeMode.DETACH.value: _run_mutation,
    "show": _run_show,
    "filter": _run_filter,
}


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        _COMMANDS[args.command](args)
    except (ClassificationError, ConfigurationError, ValueError) as exc:
        log.error("Invalid request: %s", exc)  # noqa: TRY400
        sys.exit(2)
    except Exception:
        log.exception("Command %s failed", args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
