"""boardsync CLI entry point."""

import sys
from typing import List, Optional

from . import cli_commands
from .cli_parser import build_parser
from .runtime import configure_logging


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser(cli_commands)
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])
    configure_logging(args.verbose)
    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 1
    return func(args)
