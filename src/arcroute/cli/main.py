"""
Command-line entry point: statistics and/or solutions for one instance or a directory.
"""

import logging
import sys

from arcroute.pipeline.processing import ProcessingMode, process_directory, process_instance
from arcroute.utils.cli import load_parameters, parse_args, print_parameter_help
from arcroute.utils.logging import Colors, Symbols, setup_logging


def main() -> int:
    """Run the CLI. Returns 1 when any instance failed, 0 otherwise."""
    parser = parse_args()
    args = parser.parse_args()

    if args.help_params:
        print_parameter_help()

    if not args.instance and not args.input_dir:
        parser.error("one of the arguments --instance --input-dir is required")

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        params = load_parameters(args)
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"{Symbols.CROSS} Invalid configuration: {e}")
        return 1

    mode = ProcessingMode(args.mode)

    if args.instance:
        ok = process_instance(args.instance, mode, params)
        if ok:
            logger.info(f"{Colors.GREEN}{Symbols.CHECK} {args.instance} processed{Colors.RESET}")
        return 0 if ok else 1

    try:
        summary = process_directory(args.input_dir, mode, params)
    except NotADirectoryError as e:
        logger.error(f"{Symbols.CROSS} {e}")
        return 1
    return 1 if summary.failed else 0


if __name__ == "__main__":
    sys.exit(main())
