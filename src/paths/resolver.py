"""Scan path resolution: env expansion, OS filtering, globbing and dedupe.

Every path expression, whether it comes from a paths file, the built-in
defaults, the config file or the command line, goes through the same steps:

1. reject it when it carries a definitive marker for the other OS family
   (checked on the raw text, before any expansion);
2. expand ``$VAR``/``${VAR}`` and ``%VAR%`` references;
3. normalize separators and redundant segments;
4. glob-expand wildcards, falling back to the literal path when nothing
   matches so a missing location is still reported later instead of vanishing.
"""

from __future__ import annotations

import glob
import logging
import os
import re
from typing import Iterable, List, Optional

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants, OSFamily
from paths.defaults import DEFAULT_SCAN_PATHS

logger = logging.getLogger(__name__)

_UNIX_VAR_RE = re.compile(r"\$\{([A-Za-z0-9_]+)\}|\$([A-Za-z0-9_]+)")
_WINDOWS_VAR_RE = re.compile(r"%([^%]+)%")


class PathsFileError(OSError):
    """Raised when the paths file cannot be opened or read."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"failed to read paths file {path}: {reason}")
        self.path = path
        self.reason = reason


def current_os_family() -> OSFamily:
    """Return the OS family of the running interpreter."""
    return OSFamily.WINDOWS if os.name == "nt" else OSFamily.UNIX


def expand_env_vars(path: str) -> str:
    """Expand Unix-style then Windows-style environment variable references.

    Unset ``$VAR`` references expand to an empty string. Unset or empty
    ``%VAR%`` references are kept verbatim.
    """

    def _unix(match: re.Match) -> str:
        name = match.group(1) or match.group(2)
        return os.environ.get(name, "")

    def _windows(match: re.Match) -> str:
        value = os.environ.get(match.group(1))
        return value if value else match.group(0)

    result = _UNIX_VAR_RE.sub(_unix, path)
    return _WINDOWS_VAR_RE.sub(_windows, result)


def is_path_for_os(path: str, os_family: Optional[OSFamily] = None) -> bool:
    """Check whether a raw path expression may be used on the given OS family.

    A leading ``/`` definitively marks a Unix path and a drive letter (``C:``)
    definitively marks a Windows path. Anything else (relative paths, bare
    env-var expressions) is ambiguous and accepted.
    """
    family = os_family or current_os_family()
    is_definitely_unix = path.startswith("/")
    is_definitely_windows = len(path) >= 2 and path[1] == ":"

    if family == OSFamily.WINDOWS:
        return not is_definitely_unix
    return not is_definitely_windows


def has_glob(path: str) -> bool:
    return any(ch in path for ch in Constants.GLOB_CHARS)


def expand_glob_path(path: str) -> List[str]:
    """Expand env vars, normalize, then expand glob patterns.

    Returns:
        Sorted glob matches, or a single-element list with the normalized
        path when it has no wildcards, matches nothing, or fails to expand.
    """
    substituted = expand_env_vars(path)
    if path and not substituted.strip():
        logger.warning("Path expression %r expanded to nothing; scanning current directory", path)
    expanded = os.path.normpath(substituted)
    if not has_glob(expanded):
        return [expanded]

    try:
        matches = sorted(glob.glob(expanded))
    except (OSError, ValueError) as e:
        logger.debug("Glob expansion failed for %s: %s", expanded, e)
        return [expanded]

    if not matches:
        return [expanded]
    return matches


def resolve_expression(expression: str, os_family: Optional[OSFamily] = None) -> List[str]:
    """Resolve one raw path expression into concrete candidate paths."""
    if not is_path_for_os(expression, os_family):
        logger.debug("Skipping path intended for another OS: %s", expression)
        return []
    return expand_glob_path(expression)


def resolve_expressions(expressions: Iterable[str], os_family: Optional[OSFamily] = None) -> List[str]:
    """Resolve expressions in order, skipping blank lines and ``#`` comments."""
    resolved: List[str] = []
    for raw in expressions:
        line = raw.strip()
        if not line or line.startswith(Constants.COMMENT_PREFIX):
            continue
        resolved.extend(resolve_expression(line, os_family))
    return resolved


def load_paths_file(paths_file: str, os_family: Optional[OSFamily] = None) -> List[str]:
    """Read scan path expressions from a file and resolve them.

    Raises:
        PathsFileError: If the file cannot be opened or decoded.
    """
    try:
        with open(paths_file, "r", encoding="utf-8") as file:
            lines = file.readlines()
    except (OSError, UnicodeDecodeError) as e:
        raise PathsFileError(paths_file, str(e)) from e
    return resolve_expressions(lines, os_family)


def get_default_paths(os_family: Optional[OSFamily] = None, table: Optional[dict] = None) -> List[str]:
    """Return the built-in global install locations for an OS family.

    Version-pinned entries only contribute directories that exist right now.
    """
    family = os_family or current_os_family()
    entry = (table if table is not None else DEFAULT_SCAN_PATHS).get(family, {})

    dirs = [os.path.normpath(expand_env_vars(p)) for p in entry.get("static", [])]
    for pattern in entry.get("pinned", []):
        try:
            dirs.extend(sorted(glob.glob(os.path.normpath(expand_env_vars(pattern)))))
        except (OSError, ValueError) as e:
            logger.debug("Glob expansion failed for %s: %s", pattern, e)
    return dirs


def dedupe_paths(paths: Iterable[str]) -> List[str]:
    """Drop repeated paths, keeping the first occurrence's position."""
    return list(dict.fromkeys(paths))


def resolve_scan_targets(
    paths_file: Optional[str],
    scan_global: bool = True,
    extra_paths: Optional[Iterable[str]] = None,
    cli_paths: Optional[Iterable[str]] = None,
    os_family: Optional[OSFamily] = None,
) -> List[str]:
    """Build the final, deduplicated list of directories to scan.

    Args:
        paths_file: Paths file consulted when ``scan_global`` is set.
        scan_global: Consult the paths file, or the defaults when it cannot be read.
        extra_paths: Additional expressions from the config file.
        cli_paths: Positional command-line targets.
        os_family: Override for the host OS family.

    Returns:
        Candidate directories in source order, without duplicates.
    """
    dirs: List[str] = []

    if scan_global and not paths_file:
        logger.info("No paths file configured, using default paths...")
        dirs.extend(get_default_paths(os_family))
    elif scan_global:
        try:
            loaded = load_paths_file(paths_file, os_family)
            logger.info("Loaded %d paths from %s", len(loaded), paths_file)
            dirs.extend(loaded)
        except PathsFileError as e:
            logger.warning("Could not load paths from %s: %s", e.path, e.reason)
            logger.warning("Using default paths...")
            dirs.extend(get_default_paths(os_family))

    if extra_paths:
        dirs.extend(resolve_expressions(extra_paths, os_family))

    for expression in cli_paths or []:
        dirs.extend(resolve_expression(expression, os_family))

    unique = dedupe_paths(dirs)
    if is_debug_enabled(logger):
        logger.debug(
            "Resolved scan targets",
            extra=extra_context(
                event="decision",
                component="resolver",
                action="resolve_scan_targets",
                count=len(unique),
                duplicates=len(dirs) - len(unique),
            ),
        )
    return unique
