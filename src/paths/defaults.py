"""Built-in global install locations, keyed by OS family.

``static`` entries are always returned (after env expansion); ``pinned``
entries are glob patterns over version-pinned installer directories and only
contribute paths that actually exist.
"""

from constants import OSFamily

DEFAULT_SCAN_PATHS = {
    OSFamily.UNIX: {
        "static": [
            "/usr/local/lib/node_modules",
            "/opt/homebrew/lib/node_modules",
        ],
        "pinned": [
            # Homebrew Intel Cellar keeps one directory per node version
            "/usr/local/Cellar/node/*/lib/node_modules",
        ],
    },
    OSFamily.WINDOWS: {
        "static": [
            "%APPDATA%\\npm\\node_modules",
            "%ProgramFiles%\\nodejs\\node_modules",
        ],
        "pinned": [
            # nvm-windows installs each version under %APPDATA%\nvm\vX.Y.Z
            "%APPDATA%\\nvm\\v*\\node_modules",
        ],
    },
}
