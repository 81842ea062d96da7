# tests/conftest.py
import pytest

from tower_nav.utils import observer
from tower_nav.utils.cli import terminal_view


@pytest.fixture(autouse=True)
def _reset_observer_state():
    """Keep module-level buffers and the shared terminal view from leaking between tests."""
    observer._tick_durations.clear()
    observer._searches.clear()
    observer._events.clear()
    terminal_view.get_view().enabled = False
    yield
    terminal_view.get_view().enabled = False
