"""Match report export to JSON or CSV files."""

import csv
import json
import logging
import os

logger = logging.getLogger(__name__)


def infer_format(path, explicit=None):
    """Pick the export format from an explicit choice or the file extension.

    Args:
        path (str): Output file path.
        explicit (str): Format requested on the command line or in config.

    Returns:
        str: "json" or "csv"; json when nothing else applies.
    """
    if explicit:
        return explicit.lower()
    if path.lower().endswith(".csv"):
        return "csv"
    return "json"


def export_csv(matches, path):
    """Exports the matches to a CSV file.

    Args:
        matches (list): MatchRecord instances.
        path (str): File path to export the CSV.

    Returns:
        bool: True if the file was written.
    """
    rows = [["Package Name", "Version", "Directory"]]
    for m in matches:
        rows.append([m.name, m.version, m.directory])
    try:
        with open(path, "w", newline="", encoding="utf-8") as file:
            export = csv.writer(file)
            export.writerows(rows)
        logger.info("CSV file has been successfully exported at: %s", path)
        return True
    except (OSError, csv.Error) as e:
        logger.error("CSV file couldn't be written to disk: %s", e)
        return False


def export_json(matches, path, scanned=None):
    """Exports the matches to a JSON file.

    Args:
        matches (list): MatchRecord instances.
        path (str): File path to export the JSON.
        scanned (list): Directories that were actually scanned.

    Returns:
        bool: True if the file was written.
    """
    data = {
        "matchCount": len(matches),
        "scannedDirectories": list(scanned or []),
        "matches": [m.to_dict() for m in matches],
    }
    try:
        with open(path, "w", encoding="utf-8") as file:
            json.dump(data, file, ensure_ascii=False, indent=4)
        logger.info("JSON file has been successfully exported at: %s", path)
        return True
    except OSError as e:
        logger.error("JSON file couldn't be written to disk: %s", e)
        return False


def export_matches(matches, path, fmt=None, scanned=None):
    """Write matches to ``path`` in the requested or inferred format."""
    directory = os.path.dirname(path)
    if directory and not os.path.isdir(directory):
        logger.error("Output directory does not exist: %s", directory)
        return False
    if infer_format(path, fmt) == "csv":
        return export_csv(matches, path)
    return export_json(matches, path, scanned=scanned)
