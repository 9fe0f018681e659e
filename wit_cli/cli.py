"""
Wit CLI - Command-line interface for the Wit entities API.

This layer provides the user-facing CLI commands, using the SDK layer
for all operations. It handles:
- Argument parsing
- TTY detection for human vs machine output
- JSON output for piping/automation
"""

import argparse
import json
import logging
import sys
from typing import Any

from wit_cli.core.client import CLIError, DeserializationError, ValidationError
from wit_cli.core.types import Entity, EntityValue
from wit_cli.sdk import WitClient

# =============================================================================
# Output Helpers
# =============================================================================


def is_tty() -> bool:
    """Check if stdout is a TTY (human) or pipe (machine)."""
    return sys.stdout.isatty()


def json_output(data: Any, pretty: bool = False) -> None:
    """Print JSON output."""
    indent = 2 if pretty or is_tty() else None
    print(json.dumps(data, indent=indent, default=str))


def error_output(error: CLIError) -> None:
    """Print error and exit."""
    json_output(error.to_dict())
    sys.exit(1)


def success_output(data: Any) -> None:
    """Print success output."""
    json_output(data)


def raw_output(body: bytes) -> None:
    """Print a raw API response, as JSON when it is JSON."""
    try:
        success_output(json.loads(body))
    except (ValueError, UnicodeDecodeError):
        success_output({"success": True, "response": body.decode("utf-8", errors="replace")})


def table_output(
    headers: list[str],
    rows: list[list[str]],
    widths: list[int],
) -> None:
    """Print a formatted table for human output."""
    header_line = "  ".join(h.ljust(w) for h, w in zip(headers, widths))
    print(header_line)
    print("-" * len(header_line))

    for row in rows:
        print("  ".join(str(v)[:w].ljust(w) for v, w in zip(row, widths)))


def parse_values(raw: str | None) -> list[EntityValue] | None:
    """Parse a --values argument (JSON array, or - for stdin)."""
    if not raw:
        return None
    try:
        data = json.load(sys.stdin) if raw == "-" else json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in --values: {e}")
    if not isinstance(data, list):
        raise ValidationError("--values must be a JSON array")
    values = []
    for item in data:
        try:
            value = EntityValue(value=item) if isinstance(item, str) else EntityValue.from_dict(item)
        except DeserializationError as e:
            raise ValidationError(f"Invalid entity value {item!r}: {e.message}")
        if not value.value:
            raise ValidationError(f"Invalid entity value: {item!r}")
        values.append(value)
    return values


# =============================================================================
# CLI Commands
# =============================================================================


def cmd_ent_list(client: WitClient, args: argparse.Namespace) -> None:
    """List entity ids."""
    try:
        names = client.entities.list()

        if is_tty():
            if not names:
                print("No entities found.")
                return
            table_output(["ID"], [[n] for n in names], [40])
        else:
            success_output({"data": names, "total_count": len(names)})
    except CLIError as e:
        error_output(e)


def cmd_ent_get(client: WitClient, args: argparse.Namespace) -> None:
    """Get an entity by ID."""
    try:
        entity = client.entities.get(args.entity_id)
        success_output(entity.to_dict())
    except CLIError as e:
        error_output(e)


def cmd_ent_create(client: WitClient, args: argparse.Namespace) -> None:
    """Create a new entity."""
    try:
        entity = Entity(
            id=args.entity_id,
            doc=args.doc or "",
            values=parse_values(args.values) or [],
        )
        raw_output(client.entities.create(entity))
    except CLIError as e:
        error_output(e)


def cmd_ent_update(client: WitClient, args: argparse.Namespace) -> None:
    """Update an entity's doc and/or values."""
    try:
        values = parse_values(args.values)
        if args.doc is None and values is None:
            raise ValidationError("Nothing to update. Pass --doc and/or --values")

        # Start from the current state so unspecified fields are kept
        current = client.entities.get(args.entity_id)
        entity = Entity(
            id=args.entity_id,
            doc=current.doc if args.doc is None else args.doc,
            builtin=current.builtin,
            values=current.values if values is None else values,
        )
        raw_output(client.entities.update(entity))
    except CLIError as e:
        error_output(e)


def cmd_ent_delete(client: WitClient, args: argparse.Namespace) -> None:
    """Delete an entity."""
    try:
        raw_output(client.entities.delete(args.entity_id))
    except CLIError as e:
        error_output(e)


def cmd_value_add(client: WitClient, args: argparse.Namespace) -> None:
    """Add a value to an entity."""
    try:
        value = EntityValue(value=args.value, expressions=args.expression or [])
        entity = client.entities.create_value(args.entity_id, value)
        success_output(entity.to_dict())
    except CLIError as e:
        error_output(e)


def cmd_value_delete(client: WitClient, args: argparse.Namespace) -> None:
    """Delete a value from an entity."""
    try:
        raw_output(client.entities.delete_value(args.entity_id, args.value))
    except CLIError as e:
        error_output(e)


def cmd_expr_add(client: WitClient, args: argparse.Namespace) -> None:
    """Add an expression to an entity value."""
    try:
        entity = client.entities.create_value_expression(args.entity_id, args.value, args.expression)
        success_output(entity.to_dict())
    except CLIError as e:
        error_output(e)


def cmd_expr_delete(client: WitClient, args: argparse.Namespace) -> None:
    """Delete an expression from an entity value."""
    try:
        raw_output(client.entities.delete_value_expression(args.entity_id, args.value, args.expression))
    except CLIError as e:
        error_output(e)


# =============================================================================
# Main CLI
# =============================================================================


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="wit",
        description="Wit CLI - Command-line interface for the Wit.ai entities API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  WIT_ACCESS_TOKEN   Access token sent as a Bearer token
  WIT_BASE_URL       API base URL (default https://api.wit.ai)
  WIT_API_VERSION    API version for the Accept header

Examples:
  wit ent list | jq '.data[]'
  wit ent get favorite_city
  wit ent value add favorite_city Paris --expression "City of Light"
  wit ent expr add favorite_city Barcelona Paella
""",
    )
    parser.add_argument("--base-url", help="API base URL (overrides WIT_BASE_URL)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log HTTP requests to stderr")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # ========== Entities ==========
    ent = subparsers.add_parser("ent", help="Manage entities")
    ent.set_defaults(func=lambda _c, _a: ent.print_help())
    ent_sub = ent.add_subparsers(dest="subcommand")

    e_list = ent_sub.add_parser("list", help="List entity ids")
    e_list.set_defaults(func=cmd_ent_list)

    e_get = ent_sub.add_parser("get", help="Get entity details")
    e_get.add_argument("entity_id", help="Entity ID")
    e_get.set_defaults(func=cmd_ent_get)

    e_create = ent_sub.add_parser("create", help="Create an entity")
    e_create.add_argument("entity_id", help="Entity ID")
    e_create.add_argument("--doc", "-d", help="Entity description")
    e_create.add_argument("--values", help="JSON array of values (or - for stdin)")
    e_create.set_defaults(func=cmd_ent_create)

    e_update = ent_sub.add_parser("update", help="Update an entity")
    e_update.add_argument("entity_id", help="Entity ID")
    e_update.add_argument("--doc", "-d", help="New description")
    e_update.add_argument("--values", help="JSON array of values replacing the current ones (or - for stdin)")
    e_update.set_defaults(func=cmd_ent_update)

    e_delete = ent_sub.add_parser("delete", help="Delete an entity")
    e_delete.add_argument("entity_id", help="Entity ID")
    e_delete.set_defaults(func=cmd_ent_delete)

    # ========== Values ==========
    value = ent_sub.add_parser("value", help="Manage entity values")
    value.set_defaults(func=lambda _c, _a: value.print_help())
    value_sub = value.add_subparsers(dest="value_command")

    v_add = value_sub.add_parser("add", help="Add a value")
    v_add.add_argument("entity_id", help="Entity ID")
    v_add.add_argument("value", help="Canonical value")
    v_add.add_argument("--expression", "-e", action="append", help="Expression (repeatable)")
    v_add.set_defaults(func=cmd_value_add)

    v_delete = value_sub.add_parser("delete", help="Delete a value")
    v_delete.add_argument("entity_id", help="Entity ID")
    v_delete.add_argument("value", help="Canonical value")
    v_delete.set_defaults(func=cmd_value_delete)

    # ========== Expressions ==========
    expr = ent_sub.add_parser("expr", help="Manage value expressions")
    expr.set_defaults(func=lambda _c, _a: expr.print_help())
    expr_sub = expr.add_subparsers(dest="expr_command")

    x_add = expr_sub.add_parser("add", help="Add an expression")
    x_add.add_argument("entity_id", help="Entity ID")
    x_add.add_argument("value", help="Canonical value")
    x_add.add_argument("expression", help="Expression")
    x_add.set_defaults(func=cmd_expr_add)

    x_delete = expr_sub.add_parser("delete", help="Delete an expression")
    x_delete.add_argument("entity_id", help="Entity ID")
    x_delete.add_argument("value", help="Canonical value")
    x_delete.add_argument("expression", help="Expression")
    x_delete.set_defaults(func=cmd_expr_delete)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    client = WitClient(base_url=args.base_url)

    # Run command (all subparsers have default funcs that print help)
    args.func(client, args)


if __name__ == "__main__":
    main()
