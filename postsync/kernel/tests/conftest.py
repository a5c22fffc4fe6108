"""
Kernel test configuration.

Kernel tests are pure: no client, no event loop, no network.
"""

import pytest

from postsync.kernel.app_reducer import empty_app_state
from postsync.kernel.reducer import empty_state


@pytest.fixture
def empty():
    """Fresh empty post store."""
    return empty_state()


@pytest.fixture
def empty_app():
    """Fresh empty application state."""
    return empty_app_state()
