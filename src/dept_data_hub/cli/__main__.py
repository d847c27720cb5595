"""
Unified CLI entry point for DeptDataHub.

Usage:
    python -m dept_data_hub.cli <command> [options]

Available commands:
    departments  - List departments
    tables       - List a department's owned and linked tables
    describe     - Show a table's columns
    map-headers  - Resolve a CSV header row against a table
    validate     - Map headers and validate every row of a CSV file

Exit codes:
    0  success
    1  unresolved headers or failed rows
    2  schema configuration defect or unreadable input
"""

import argparse
import sys
from typing import List, Optional

from dept_data_hub.infrastructure.schema import SchemaRegistryError
from dept_data_hub.utils.logging import get_logger

logger = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dept_data_hub.cli",
        description="DeptDataHub CLI - department schemas and import checks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m dept_data_hub.cli departments
  python -m dept_data_hub.cli tables sales
  python -m dept_data_hub.cli describe inventory inventory_items --locale ar
  python -m dept_data_hub.cli map-headers inventory inventory_items items.csv
  python -m dept_data_hub.cli validate inventory inventory_items items.csv --max-failure-rate 0.1
        """,
    )
    parser.add_argument(
        "--locale",
        default=None,
        help="Display locale for labels ('ar' for Arabic labels)",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
        help="Command to execute",
    )

    subparsers.add_parser("departments", help="List departments")

    tables_parser = subparsers.add_parser(
        "tables", help="List a department's owned and linked tables"
    )
    tables_parser.add_argument("department", help="Department id (e.g. inventory)")

    describe_parser = subparsers.add_parser("describe", help="Show a table's columns")
    describe_parser.add_argument("department", help="Department id")
    describe_parser.add_argument("table", help="Table id")
    describe_parser.add_argument(
        "--template",
        action="store_true",
        help="Also print the import template header row",
    )

    for name, help_text in (
        ("map-headers", "Resolve a CSV header row against a table"),
        ("validate", "Map headers and validate every row of a CSV file"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("department", help="Department id")
        sub.add_argument("table", help="Table id")
        sub.add_argument("csv", help="Path to a CSV file whose first row is the header")
        sub.add_argument(
            "--threshold",
            type=float,
            default=None,
            help="Fuzzy match threshold (default: DDH_FUZZY_MATCH_THRESHOLD)",
        )
        if name == "validate":
            sub.add_argument(
                "--max-failure-rate",
                type=float,
                default=None,
                help="Reject the file when failed rows / total rows reaches this rate",
            )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point with subcommand routing.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    from dept_data_hub.cli.importer import map_headers_command, validate_command
    from dept_data_hub.cli.schema import (
        describe_table_command,
        list_departments_command,
        list_tables_command,
    )

    handlers = {
        "departments": list_departments_command,
        "tables": list_tables_command,
        "describe": describe_table_command,
        "map-headers": map_headers_command,
        "validate": validate_command,
    }

    try:
        return handlers[args.command](args)
    except SchemaRegistryError as e:
        logger.error("cli.schema_error", command=args.command, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except (OSError, ValueError) as e:
        logger.error("cli.input_error", command=args.command, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
