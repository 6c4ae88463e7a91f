"""
GVT - a minimal local version control engine.

Snapshot tracked files into numbered versions, check any of them out again.
"""

from importlib.metadata import version as _version

__version__ = _version("gvt")
