"""
Remote Layer - HTTP access to the tuning server.
"""

from .client import CacheBuster, RemoteAuthority, RemoteError

__all__ = ["CacheBuster", "RemoteAuthority", "RemoteError"]
