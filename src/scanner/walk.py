"""Error-tolerant directory walk driven by a per-node visitor."""

from __future__ import annotations

import logging
import os
from typing import Callable, Iterator, Optional

from models import VisitOutcome

logger = logging.getLogger(__name__)

Visitor = Callable[[str, bool], VisitOutcome]
ErrorHandler = Callable[[OSError], None]


def walk_tree(root: str, visitor: Visitor, on_error: Optional[ErrorHandler] = None) -> Iterator[str]:
    """Walk ``root`` top-down and yield every path the visitor records.

    The visitor is called as ``visitor(path, is_dir)`` for each entry below
    ``root``. ``DESCEND`` continues into a directory (files are simply
    passed over), ``SKIP_SUBTREE`` prunes a directory or ignores a file, and
    ``RECORD`` yields the path; recorded directories are still descended.

    Symlinks are not followed. An ``OSError`` from listing a directory or
    from the visitor is handed to ``on_error`` and the walk carries on with
    the next node.
    """

    def _report(err: OSError) -> None:
        if on_error is not None:
            on_error(err)
        else:
            logger.debug("Skipping unreadable entry: %s", err)

    for dirpath, dirnames, filenames in os.walk(root, topdown=True, onerror=_report, followlinks=False):
        keep = []
        for name in dirnames:
            path = os.path.join(dirpath, name)
            try:
                outcome = visitor(path, True)
            except OSError as e:
                _report(e)
                continue
            if outcome is VisitOutcome.SKIP_SUBTREE:
                continue
            if outcome is VisitOutcome.RECORD:
                yield path
            keep.append(name)
        dirnames[:] = keep

        for name in filenames:
            path = os.path.join(dirpath, name)
            try:
                outcome = visitor(path, False)
            except OSError as e:
                _report(e)
                continue
            if outcome is VisitOutcome.RECORD:
                yield path
