"""
Command-line filter: read an ASA/PIX configuration, write the expanded version.

    asa-expander running-config.txt -o expanded.txt
    show-run-capture | asa-expander
"""
import argparse
import logging
import sys
from typing import List, Optional

from asa_expander.core.config import settings
from asa_expander.core.exceptions import ConfigExpansionError
from asa_expander.core.logging_config import setup_logging
from asa_expander.services.pretty_service import ConfigPrettyPrinter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="asa-expander",
        description="Expand object and object-group references in an ASA/PIX configuration.",
    )
    ap.add_argument("infile", nargs="?", default="-", help="Configuration file (default: stdin)")
    ap.add_argument("-o", "--out", dest="outfile", default=None, help="Output file (default: stdout)")
    ap.add_argument("--no-names", action="store_true", help="Do not substitute 'name' definitions")
    ap.add_argument("--no-grouping", action="store_true", help="Do not insert '!' separators or cluster route/static")
    ap.add_argument("--no-nat-annotations", action="store_true", help="Do not annotate nat commands")
    ap.add_argument("--no-acl-expansion", action="store_true", help="Leave access-lists unexpanded")
    ap.add_argument("--log-level", default=settings.LOG_LEVEL, help="Logging level (default: %(default)s)")
    return ap


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8", errors="ignore") as handle:
        return handle.read()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level)

    printer = ConfigPrettyPrinter(
        substitute_names=False if args.no_names else None,
        group_commands=False if args.no_grouping else None,
        annotate_nat=False if args.no_nat_annotations else None,
        expand_access_lists=False if args.no_acl_expansion else None,
    )

    try:
        content = _read_input(args.infile)
        result = printer.render(content)
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except ConfigExpansionError as e:
        logger.debug("Expansion failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.outfile:
        with open(args.outfile, "w", encoding="utf-8") as handle:
            handle.write(result.text)
    else:
        sys.stdout.write(result.text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
