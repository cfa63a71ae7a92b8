"""Installed-package scanning."""

from .walk import walk_tree
from .manifest import in_module_dir, manifest_visitor, read_manifest, scan_directory

__all__ = ["walk_tree", "in_module_dir", "manifest_visitor", "read_manifest", "scan_directory"]
