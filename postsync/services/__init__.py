"""
Transport layer for postsync.

All HTTP lives here and ONLY here. No network access outside this module.
"""

from postsync.services.client import ApiClient, ClientError

__all__ = ["ApiClient", "ClientError"]
