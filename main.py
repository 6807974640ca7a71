# main.py

"""Entry point for the dealmatch product comparison CLI."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("dealmatch.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    valid_ids = ", ".join(s["id"] for s in Settings.AVAILABLE_SITES)

    parser = argparse.ArgumentParser(
        prog="dealmatch",
        description="Cross-site product matching and price comparison.",
        epilog=f"Available sites: {valid_ids}",
    )
    parser.add_argument(
        "input",
        help=(
            "JSON file with a {source, candidates} object "
            "or an array of them."
        ),
    )
    parser.add_argument(
        "-s",
        "--sites",
        default=None,
        help="Comma-separated site IDs to compare against (default: all).",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        default=None,
        help="Comma-separated negative keywords to filter out.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        dest="output_dir",
        help="Custom output directory (default: results/).",
    )
    parser.add_argument(
        "--queries",
        action="store_true",
        default=False,
        help="Print the generated search queries for each source product.",
    )
    parser.add_argument(
        "--csv",
        action="store_true",
        default=False,
        dest="export_csv",
        help="Also export matches as CSV.",
    )
    parser.add_argument(
        "--no-save",
        action="store_false",
        default=True,
        dest="save",
        help="Do not write results to disk.",
    )
    return parser


def main() -> None:
    """Parse arguments, run the comparison and exit with its status."""
    log_file = setup_logging()
    logger.info("dealmatch starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    from src.cli.runner import cli_compare

    try:
        exit_code = asyncio.run(
            cli_compare(
                input_path=args.input,
                site_csv=args.sites,
                exclude_csv=args.exclude,
                output_format=args.output_format,
                output_dir=args.output_dir,
                show_queries=args.queries,
                save=args.save,
                export_csv=args.export_csv,
            )
        )
    except Exception:
        logger.critical("Fatal error during comparison", exc_info=True)
        raise
    finally:
        logger.info("dealmatch shutting down")
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
