import json
import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_root_logging():
    """Drop handlers added by configure_logging so they don't outlive capsys streams."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler in handlers:
            continue
        if handler.get_name() == "npmsweep-console" or isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def make_package():
    """Write a package.json at ``base/<rel>/package.json`` and return its directory."""

    def _make(base, rel, name="leftpad", version="1.0.0", body=None):
        pkg_dir = base / rel
        pkg_dir.mkdir(parents=True, exist_ok=True)
        manifest = pkg_dir / "package.json"
        if body is not None:
            manifest.write_text(body, encoding="utf-8")
        else:
            manifest.write_text(json.dumps({"name": name, "version": version}), encoding="utf-8")
        return pkg_dir

    return _make
