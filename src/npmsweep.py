"""npmsweep - sweep installed npm packages for known-compromised versions.

    Loads an IOC list of ``name,version`` pairs, resolves the directories to
    scan, walks each one for ``package.json`` files under ``node_modules`` and
    reports every installed package that matches.

    Returns:
        int: Exit code (0 clean, 1 matches, 2 misconfiguration, -1 error)
"""
import logging
import sys

from args import parse_args
from cli_config import ConfigError, build_settings
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes
from export import export_matches
from ioc.loader import IOCLoadError, load_iocs
from models import ScanPhase
from paths.resolver import resolve_scan_targets
from scanner.manifest import scan_directory

logger = logging.getLogger(__name__)


def _enter_phase(phase):
    if is_debug_enabled(logger):
        logger.debug(
            "Entering phase %s",
            phase.value,
            extra=extra_context(event="phase", component="cli", action=phase.value),
        )


def print_report(matches, stream=None):
    """Prints the final match count followed by every match.

    Args:
        matches (list): MatchRecord instances in discovery order.
        stream: Output stream; stdout when omitted.
    """
    out = stream or sys.stdout
    print(f"\nScan complete. Found {len(matches)} matches.", file=out)
    if matches:
        print("\nMatches:", file=out)
        for match in matches:
            print(str(match), file=out)


def run_scan(settings):
    """Runs one scan from loaded settings.

    Args:
        settings (ScanSettings): Effective run settings.

    Returns:
        int: Exit code value.
    """
    _enter_phase(ScanPhase.LOADING_IOCS)
    try:
        iocs = load_iocs(settings.ioc_file)
    except IOCLoadError as e:
        logger.error("Error loading IOCs: %s", e)
        return ExitCodes.MISCONFIGURATION.value
    logger.info("Loaded %d IOCs from %s", len(iocs), settings.ioc_file)

    _enter_phase(ScanPhase.RESOLVING_PATHS)
    dirs_to_scan = resolve_scan_targets(
        settings.paths_file,
        scan_global=settings.scan_global,
        extra_paths=settings.extra_paths,
        cli_paths=settings.targets,
    )
    if not dirs_to_scan:
        logger.error("No directories to scan. Use --global or provide paths as arguments.")
        return ExitCodes.MISCONFIGURATION.value

    _enter_phase(ScanPhase.SCANNING)
    all_matches = []
    scanned = []
    for dir_path in dirs_to_scan:
        result = scan_directory(dir_path, iocs)
        if result.skipped:
            continue
        scanned.append(dir_path)
        if result.error:
            logger.warning("Error scanning %s: %s", dir_path, result.error)
        all_matches.extend(result.matches)

    _enter_phase(ScanPhase.REPORTING)
    print_report(all_matches)
    if settings.output:
        export_matches(all_matches, settings.output, settings.output_format, scanned=scanned)

    _enter_phase(ScanPhase.DONE)
    if all_matches:
        logger.warning("%d installed package(s) match the IOC list.", len(all_matches))
        return ExitCodes.MATCHES_FOUND.value
    return ExitCodes.SUCCESS.value


def _run(argv=None):
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, quiet=args.QUIET)

    try:
        settings = build_settings(args)
    except ConfigError as e:
        logger.error("%s", e)
        return ExitCodes.MISCONFIGURATION.value

    try:
        configure_logging(settings.log_level, log_file=settings.log_file, quiet=settings.quiet)
    except OSError as e:
        logger.error("Log file couldn't be opened: %s", e)
        return ExitCodes.MISCONFIGURATION.value
    logger.info(Constants.EXIT_CODE_LEGEND)
    if settings.config_path:
        logger.info("Using config file: %s", settings.config_path)
    return run_scan(settings)


def main(argv=None):
    """Main function of the program."""
    try:
        code = _run(argv)
    except Exception:  # pylint: disable=broad-exception-caught
        logger.exception("Unexpected error during scan")
        code = ExitCodes.INTERNAL_ERROR.value
    sys.exit(code)


if __name__ == "__main__":
    main()
