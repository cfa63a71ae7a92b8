"""Argument parsing functionality for npmsweep."""

import argparse
from constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program.

    Options left unset stay None so configuration file values can fill them
    before falling back to built-in defaults.
    """
    parser = argparse.ArgumentParser(
        prog=Constants.PROG_NAME,
        description=(
            "npmsweep - Sweep installed npm packages for known-compromised versions"
        ),
        epilog=Constants.EXIT_CODE_LEGEND,
        add_help=True,
    )

    parser.add_argument("-i", "--ioc",
                        dest="IOC_FILE",
                        help=f"Path to IOC file with name,version lines (default: {Constants.DEFAULT_IOC_FILE})",
                        action="store", type=str)
    parser.add_argument("-p", "--paths",
                        dest="PATHS_FILE",
                        help=f"Path to file containing scan paths (default: {Constants.DEFAULT_PATHS_FILE})",
                        action="store", type=str)
    parser.add_argument("--global",
                        dest="SCAN_GLOBAL",
                        help="Scan paths from the paths file, or default paths if it cannot be read (default: on)",
                        action=argparse.BooleanOptionalAction)
    parser.add_argument("targets",
                        metavar="PATH",
                        help="Additional directories to scan; env vars and globs are expanded",
                        nargs="*")

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to output file (JSON or CSV)",
                        action="store",
                        type=str)
    parser.add_argument("-f", "--format",
                        dest="OUTPUT_FORMAT",
                        help="Output format (json or csv). If not specified, inferred from --output extension; defaults to json.",
                        action="store",
                        type=str.lower,
                        choices=Constants.OUTPUT_FORMATS)

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=Constants.LOG_LEVELS)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Only print errors to the diagnostic stream.",
                        action="store_true")

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
