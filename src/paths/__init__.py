"""Scan path resolution."""

from .defaults import DEFAULT_SCAN_PATHS
from .resolver import (
    PathsFileError,
    current_os_family,
    dedupe_paths,
    expand_env_vars,
    expand_glob_path,
    get_default_paths,
    is_path_for_os,
    load_paths_file,
    resolve_expression,
    resolve_scan_targets,
)

__all__ = [
    "DEFAULT_SCAN_PATHS",
    "PathsFileError",
    "current_os_family",
    "dedupe_paths",
    "expand_env_vars",
    "expand_glob_path",
    "get_default_paths",
    "is_path_for_os",
    "load_paths_file",
    "resolve_expression",
    "resolve_scan_targets",
]
