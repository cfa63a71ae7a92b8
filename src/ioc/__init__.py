"""IOC list handling."""

from .loader import IOCLoadError, ioc_key, load_iocs, parse_ioc_lines

__all__ = ["IOCLoadError", "ioc_key", "load_iocs", "parse_ioc_lines"]
