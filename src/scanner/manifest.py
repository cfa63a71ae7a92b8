"""Installed-package scanner: find ``package.json`` files under ``node_modules``."""

from __future__ import annotations

import json
import logging
import os
import re
from typing import AbstractSet, Optional

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from ioc.loader import ioc_key
from models import ManifestRecord, MatchRecord, ScanResult, VisitOutcome
from scanner.walk import walk_tree

logger = logging.getLogger(__name__)

_SEPARATORS_RE = re.compile(r"[\\/]")


def in_module_dir(path: str) -> bool:
    """Return True if a directory component of ``path`` is ``node_modules``."""
    parent = os.path.dirname(path)
    return Constants.MODULE_DIR in _SEPARATORS_RE.split(parent)


def manifest_visitor(path: str, is_dir: bool) -> VisitOutcome:
    """Record manifests inside module-storage directories, descend everywhere else."""
    if is_dir:
        return VisitOutcome.DESCEND
    if os.path.basename(path) == Constants.MANIFEST_FILE and in_module_dir(path):
        return VisitOutcome.RECORD
    return VisitOutcome.SKIP_SUBTREE


def read_manifest(path: str) -> Optional[ManifestRecord]:
    """Read name and version from a manifest.

    Returns:
        The record, or None when the file cannot be read, is not a JSON
        object, or carries non-string name/version values.
    """
    try:
        with open(path, "r", encoding="utf-8-sig") as file:
            data = json.load(file)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.debug("Unreadable manifest %s: %s", path, e)
        return None

    if not isinstance(data, dict):
        return None
    name = data.get("name")
    version = data.get("version")
    if name is not None and not isinstance(name, str):
        return None
    if version is not None and not isinstance(version, str):
        return None
    return ManifestRecord(name=name, version=version)


def scan_directory(dir_path: str, iocs: AbstractSet[str]) -> ScanResult:
    """Recursively scan one directory for installed packages listed in the IOC set.

    Unreadable subtrees and broken manifests are passed over. A directory
    that does not exist yields an empty, skipped result. When the root
    itself cannot be listed the result carries a soft ``error``.

    Args:
        dir_path: Resolved directory to scan.
        iocs: ``name,version`` keys.

    Returns:
        ScanResult with matches in traversal order.
    """
    result = ScanResult(root=dir_path)
    try:
        os.stat(dir_path)
    except FileNotFoundError:
        logger.info("Skipping non-existent directory: %s", dir_path)
        result.skipped = True
        return result
    except OSError as e:
        logger.debug("Could not stat %s: %s", dir_path, e)

    root_norm = os.path.normpath(dir_path)

    def _on_error(err: OSError) -> None:
        filename = getattr(err, "filename", None)
        if filename is not None and os.path.normpath(str(filename)) == root_norm:
            result.error = str(err)
        else:
            logger.debug("Skipping inaccessible path: %s", err)

    logger.info("Scanning: %s", dir_path)
    for manifest_path in walk_tree(dir_path, manifest_visitor, on_error=_on_error):
        record = read_manifest(manifest_path)
        if record is None or not record.is_complete():
            continue
        result.manifests_checked += 1
        if ioc_key(record.name, record.version) in iocs:
            match = MatchRecord(
                name=record.name,
                version=record.version,
                directory=os.path.dirname(manifest_path),
            )
            logger.debug("IOC hit: %s", match)
            result.matches.append(match)

    if is_debug_enabled(logger):
        logger.debug(
            "Finished scanning directory",
            extra=extra_context(
                event="function_exit",
                component="scanner",
                action="scan_directory",
                target=dir_path,
                count=len(result.matches),
                manifests=result.manifests_checked,
            ),
        )
    return result
