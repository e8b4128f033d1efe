#!/usr/bin/env python3
"""
Command-line options for the loader.
"""
import argparse
from typing import List, Optional, Tuple


def build_loader_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Load the IMDb TSV datasets into SQLite and run the stored query on demand.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "--preserve",
        action="store_true",
        help="Keep the existing database file as-is: no deletion, no reload.",
    )
    parser.add_argument(
        "--env",
        type=str,
        default=None,
        help=(
            "Environment name for configuration override (e.g., 'dev', 'prod'). "
            "Loads config_<env>.yaml in addition to the base config.yaml."
        ),
    )
    return parser


def parse_loader_args(argv: Optional[List[str]] = None) -> Tuple[argparse.Namespace, List[str]]:
    """
    Parse CLI arguments. Arguments the loader does not know are returned
    separately instead of aborting.

    Returns:
        (parsed arguments, unrecognised arguments)
    """
    return build_loader_parser().parse_known_args(argv)
