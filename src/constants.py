"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Downstream automation branches on these values; keep them stable.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    MATCHES_FOUND = 1
    MISCONFIGURATION = 2
    INTERNAL_ERROR = -1


class OSFamily(Enum):
    """Operating system families that carry distinct path conventions.

    Args:
        Enum (string): OS family name.
    """

    UNIX = "unix"
    WINDOWS = "windows"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    PROG_NAME = "npmsweep"
    DEFAULT_IOC_FILE = "ioc.txt"
    DEFAULT_PATHS_FILE = "paths.txt"
    MANIFEST_FILE = "package.json"
    MODULE_DIR = "node_modules"
    IOC_DELIMITER = ","
    COMMENT_PREFIX = "#"
    GLOB_CHARS = ("*", "?")
    OUTPUT_FORMATS = ["json", "csv"]
    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    MATCH_PREFIX = "[MATCH]"

    ENV_LOG_LEVEL = "NPMSWEEP_LOG_LEVEL"
    ENV_CONFIG = "NPMSWEEP_CONFIG"
    CONFIG_FILENAMES = ["npmsweep.yml", "npmsweep.yaml"]
    USER_CONFIG_DIR = "~/.config/npmsweep"

    EXIT_CODE_LEGEND = (
        "Exit codes: 0 = no matches found, 1 = matches found, "
        "2 = no scan due to misconfiguration, -1 = error"
    )
