"""
A thin client for the salt-api REST interface
"""

from saltapi.version import __version__, __version_info__

__all__ = ("__version__", "__version_info__")
