import argparse
import sys
from typing import Optional

from dotenv import load_dotenv

from db2file.converter import Converter
from db2file.database.dialects import DatabaseKind
from db2file.database.fetcher import ALL_ROWS
from db2file.errors import ConfigurationError, DB2FileError
from db2file.exporter import FILE_FORMATS, export_data, render_document
from db2file.extras import load_configuration
from db2file.generator import DEFAULT_ROW_ELEMENT, DEFAULT_TABLE_ELEMENT
from db2file.logger import get_logger, setup_logging

logger = get_logger("db2file")


def create_arguments() -> argparse.ArgumentParser:
    """
    Creates and configures the argument parser for the command-line interface.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="db2file",
        description="Fetches rows from a database and writes them as JSON, XML or CSV",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("-c", "--connection", type=str, help="Connection name from config/connections.")
    target.add_argument(
        "--kind",
        type=str,
        choices=[kind.name.lower() for kind in DatabaseKind],
        help="Database kind for an ad-hoc connection.",
    )
    parser.add_argument("--database", type=str, help="Database name or path (with --kind).")
    parser.add_argument("--host", type=str)
    parser.add_argument("--port", type=int)
    parser.add_argument("--username", type=str)
    parser.add_argument("--password", type=str)
    parser.add_argument("--charset", type=str, default="utf8")
    parser.add_argument("--environment", type=str, help="Environment overrides to apply (with --connection).")

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("-t", "--table", type=str)
    source.add_argument("-q", "--query", type=str)
    parser.add_argument("--count", type=int, default=ALL_ROWS, help="Rows to get from --table, -1 for all.")
    parser.add_argument("--offset", type=int, default=0)

    parser.add_argument("-s", "--save-path", type=str, help="Write to this file instead of stdout.")
    parser.add_argument("-f", "--output-format", type=str, choices=FILE_FORMATS)
    parser.add_argument("--table-element", type=str)
    parser.add_argument("--row-element", type=str)
    parser.add_argument("--strict-escaping", action=argparse.BooleanOptionalAction, default=None)

    return parser


def _output_defaults() -> dict:
    try:
        return dict(load_configuration().output)
    except (DB2FileError, FileNotFoundError):
        return {}


def _create_converter(args: argparse.Namespace, strict_escaping: bool) -> Converter:
    if args.connection:
        return Converter.from_config(
            args.connection, args.environment, strict_escaping=strict_escaping
        )

    if args.database is None:
        raise ConfigurationError("--database is required with --kind!")
    return Converter(
        args.kind,
        args.database,
        host=args.host,
        username=args.username,
        password=args.password,
        charset=args.charset,
        port=args.port,
        strict_escaping=strict_escaping,
    )


def main(argv: Optional[list[str]] = None) -> int:
    """
    The main function of the application.
    """
    parser = create_arguments()
    args = parser.parse_args(argv)

    defaults = _output_defaults()
    strict_escaping = args.strict_escaping
    if strict_escaping is None:
        strict_escaping = bool(defaults.get("strict_escaping", False))

    output_format = args.output_format
    if output_format is None:
        if args.save_path is not None:
            output_format = args.save_path.rsplit(".", 1)[-1].lower()
        else:
            output_format = "json"
    if output_format not in FILE_FORMATS:
        parser.error(f"Cannot infer output format from '{args.save_path}'")

    try:
        converter = _create_converter(args, strict_escaping)
    except DB2FileError as e:
        logger.error(f"xxx Could not set up connection | Error: {e}")
        return 1

    try:
        if args.table:
            rows = converter.fetch_table(args.table, args.count, args.offset)
        else:
            rows = converter.fetch_query(args.query)

        xml_options = {
            "charset": converter.charset,
            "table_element": args.table_element or defaults.get("table_element", DEFAULT_TABLE_ELEMENT),
            "row_element": args.row_element or defaults.get("row_element", DEFAULT_ROW_ELEMENT),
            "strict_escaping": strict_escaping,
            "indent": defaults.get("indent", " "),
        }
        if output_format != "xml":
            xml_options = {}

        if args.save_path:
            export_data(args.save_path, rows, output_format, **xml_options)
        else:
            sys.stdout.write(render_document(rows, output_format, **xml_options))
    except (DB2FileError, ValueError) as e:
        logger.error(f"xxx FAILED on {converter.kind.name} | Error: {e}")
        return 1
    finally:
        converter.close()

    return 0


def cli():
    load_dotenv()
    setup_logging()

    sys.exit(main())


if __name__ == "__main__":
    cli()
