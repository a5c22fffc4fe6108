"""Diagnostic records for failed remote operations."""

from __future__ import annotations

import logging

from postsync.kernel.records import make_record
from postsync.kernel.types import LOG_ERROR, Record, now_iso
from postsync.services.client import ClientError

logger = logging.getLogger(__name__)


def log_error(error: Exception, *, displayable: bool = False) -> Record:
    """
    Log a failure and build the errors.log record that keeps it in state.
    """
    if isinstance(error, ClientError):
        logger.warning(
            "request failed: status=%s id=%s url=%s: %s",
            error.status_code,
            error.server_error_id or "-",
            error.url,
            error.message,
        )
    else:
        logger.warning("request failed: %r", error)

    return make_record(
        LOG_ERROR,
        {"error": error, "displayable": displayable, "date": now_iso()},
    )
