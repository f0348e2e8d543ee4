"""
Rollcall command-line interface.

Usage:
    rollcall parse "Smith, John E." --casing title
    rollcall resolve "John Smith" --csv data/directory_users.csv
    rollcall resolve --batch names.csv --backend ldap --tier exact --format table
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence
import argparse
import json
import logging
import sys

import pandas as pd

from rollcall import __version__
from rollcall.config import RollcallConfig
from rollcall.directory import BACKENDS, build_directory
from rollcall.errors import (
    ConfigurationError,
    DirectoryQueryError,
    DirectoryUnavailable,
    ParseError,
)
from rollcall.identity import BatchItem, IdentityResolver, MatchTier
from rollcall.names import CasingPolicy, NameParser, strategy_for_locale

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_PARSE_ERROR = 2
EXIT_DIRECTORY_UNAVAILABLE = 3
EXIT_DIRECTORY_QUERY_ERROR = 4


def load_batch(path: Path) -> List[str]:
    """
    Read names to resolve from a file.

    CSV files use the "name" column (or the first column if there is no
    such column); any other file is read as one name per line.
    """
    if path.suffix.lower() == ".csv":
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
        column = "name" if "name" in df.columns else df.columns[0]
        names = df[column].tolist()
    else:
        names = path.read_text(encoding="utf-8").splitlines()
    names = [n for n in names if n.strip()]
    logger.info(f"Loaded {len(names)} names from {path}")
    return names


def _rows(items: Sequence[BatchItem]) -> List[Dict]:
    rows = []
    for item in items:
        if item.error is not None:
            rows.append({"input": item.input, "tier": "", "count": 0,
                         "account": "", "mail": "", "note": str(item.error)})
            continue
        resolution = item.resolution
        results = item.results()
        if not results:
            rows.append({"input": item.input, "tier": resolution.tier.label,
                         "count": resolution.match_count, "account": "", "mail": "",
                         "note": resolution.note})
        for match in results:
            rows.append({"input": item.input, "tier": match.match_tier.label,
                         "count": match.match_count, "account": match.account_name,
                         "mail": match.mail, "note": resolution.note})
    return rows


def _json_items(items: Sequence[BatchItem]) -> List[Dict]:
    out = []
    for item in items:
        if item.error is not None:
            out.append({"input": item.input, "error": str(item.error)})
            continue
        entry = item.resolution.to_dict()
        entry["input"] = item.input
        entry["results"] = [r.to_dict() for r in item.results()]
        out.append(entry)
    return out


def cmd_parse(args: argparse.Namespace, config: RollcallConfig) -> int:
    parser = NameParser(
        CasingPolicy.parse(args.casing or config.casing),
        strategy_for_locale(args.locale or config.locale),
    )
    parsed = parser.parse(args.name)
    print(json.dumps(parsed.to_dict(), indent=2))
    return EXIT_OK


def cmd_resolve(args: argparse.Namespace, config: RollcallConfig) -> int:
    names = list(args.names)
    if args.batch:
        names.extend(load_batch(Path(args.batch)))
    if not names:
        raise ConfigurationError("No names given (pass names or --batch FILE)")

    if args.backend:
        config.backend = args.backend
    if args.csv:
        config.csv_path = Path(args.csv)

    tier_filter = MatchTier.parse(args.tier)
    directory = build_directory(config)
    try:
        resolver = IdentityResolver(
            directory,
            casing=CasingPolicy.parse(args.casing or config.casing),
            strategy=strategy_for_locale(args.locale or config.locale),
        )
        items = resolver.resolve_many(names, tier_filter=tier_filter, max_workers=args.workers)
    finally:
        close = getattr(directory, "close", None)
        if close is not None:
            close()

    if args.format == "table":
        print(pd.DataFrame(_rows(items)).to_string(index=False))
    else:
        print(json.dumps(_json_items(items), indent=2))

    if len(names) == 1 and items[0].error is not None:
        return EXIT_PARSE_ERROR
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rollcall",
        description="Resolve free-text names to directory accounts",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default=None, help="Logging level (default: from config)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_parse = sub.add_parser("parse", help="Parse a name into its components")
    p_parse.add_argument("name", help="Name to parse, e.g. 'Smith, John E.'")
    p_parse.add_argument("--casing", help="none, upper, lower, title/proper")
    p_parse.add_argument("--locale", help="Locale for casing rules, e.g. tr_TR")
    p_parse.set_defaults(func=cmd_parse)

    p_resolve = sub.add_parser("resolve", help="Resolve names to directory accounts")
    p_resolve.add_argument("names", nargs="*", help="Names to resolve")
    p_resolve.add_argument("--batch", help="CSV (column 'name') or text file of names")
    p_resolve.add_argument("--tier", help="Only show matches at this tier (Exact, LastName, FirstName)")
    p_resolve.add_argument("--casing", help="none, upper, lower, title/proper")
    p_resolve.add_argument("--locale", help="Locale for casing rules, e.g. tr_TR")
    p_resolve.add_argument("--backend", choices=BACKENDS, help="Directory backend")
    p_resolve.add_argument("--csv", help="Directory export CSV (csv backend)")
    p_resolve.add_argument("--workers", type=int, default=1, help="Parallel resolutions")
    p_resolve.add_argument("--format", choices=("json", "table"), default="json")
    p_resolve.set_defaults(func=cmd_resolve)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = RollcallConfig.from_env()

    logging.basicConfig(
        level=(args.log_level or config.log_level).upper(),
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )

    try:
        return args.func(args, config)
    except ParseError as e:
        logger.error(str(e))
        return EXIT_PARSE_ERROR
    except ConfigurationError as e:
        logger.error(str(e))
        return EXIT_CONFIG_ERROR
    except DirectoryUnavailable as e:
        logger.error(f"Directory unreachable: {e}")
        return EXIT_DIRECTORY_UNAVAILABLE
    except DirectoryQueryError as e:
        logger.error(f"Directory query failed: {e}")
        return EXIT_DIRECTORY_QUERY_ERROR


if __name__ == "__main__":
    sys.exit(main())
