"""IOC list loading: ``name,version`` lines into an exact-match lookup set."""

from __future__ import annotations

import logging
from typing import FrozenSet, Iterable, Set

from constants import Constants

logger = logging.getLogger(__name__)


class IOCLoadError(OSError):
    """Raised when the IOC source cannot be opened or read."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"failed to read IOC file {path}: {reason}")
        self.path = path
        self.reason = reason


def ioc_key(name: str, version: str) -> str:
    """Build the lookup key for a package name and version.

    Both parts are used verbatim; versions are never normalized, so
    ``1.0`` and ``1.0.0`` are different keys.
    """
    return f"{name}{Constants.IOC_DELIMITER}{version}"


def parse_ioc_lines(lines: Iterable[str], source: str = "<iocs>") -> Set[str]:
    """Parse IOC lines, skipping blanks, comments and malformed entries.

    Args:
        lines: Raw lines of the IOC source.
        source: Label used in warnings.

    Returns:
        Set of ``name,version`` keys.
    """
    iocs: Set[str] = set()
    for line_num, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith(Constants.COMMENT_PREFIX):
            continue

        parts = line.split(Constants.IOC_DELIMITER)
        if len(parts) != 2:
            logger.warning("Invalid format at %s line %d: %s", source, line_num, line)
            continue

        name = parts[0].strip()
        version = parts[1].strip()
        if not name or not version:
            logger.warning("Empty name or version at %s line %d: %s", source, line_num, line)
            continue

        iocs.add(ioc_key(name, version))
    return iocs


def load_iocs(ioc_path: str) -> FrozenSet[str]:
    """Load the IOC file into an immutable set of lookup keys.

    Raises:
        IOCLoadError: If the file cannot be opened or decoded.
    """
    try:
        with open(ioc_path, "r", encoding="utf-8") as file:
            iocs = parse_ioc_lines(file, source=ioc_path)
    except (OSError, UnicodeDecodeError) as e:
        raise IOCLoadError(ioc_path, str(e)) from e
    return frozenset(iocs)
