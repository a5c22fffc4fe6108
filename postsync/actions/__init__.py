"""
Action pipeline for postsync.

Coroutines that talk to the server through services.client and report
everything they learn as records dispatched into a kernel Store.
"""

from postsync.actions.helpers import SessionContext, bind_client_func, force_logout_if_necessary
from postsync.actions.posts import PostActions
from postsync.actions.preferences import PreferenceActions
from postsync.actions.users import UserActions
from postsync.actions.websocket import WebSocketEventHandler

__all__ = [
    "PostActions",
    "UserActions",
    "PreferenceActions",
    "WebSocketEventHandler",
    "SessionContext",
    "bind_client_func",
    "force_logout_if_necessary",
]
