"""Pytest configuration and fixtures."""

from pathlib import Path
from tempfile import NamedTemporaryFile

import pytest

from mentionkit.session import DeferredQueue, run_pending


@pytest.fixture(autouse=True)
def test_triggers_path(monkeypatch):
    """Create a temporary trigger file and set MENTIONS_TRIGGERS_PATH for all tests."""
    yaml_content = """
triggers:
  - symbol: "@"
    max_extra_words: 1
  - symbol: "#"
    hide_symbol_in_display: true
"""
    with NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        f.write(yaml_content)
        f.flush()
        config_path = f.name

    monkeypatch.setenv("MENTIONS_TRIGGERS_PATH", config_path)

    # Clear the lru_cache for settings and triggers config
    from mentionkit.config.settings import get_settings
    from mentionkit.config.triggers import get_triggers_config

    get_settings.cache_clear()
    get_triggers_config.cache_clear()

    yield config_path

    # Cleanup
    Path(config_path).unlink(missing_ok=True)
    get_settings.cache_clear()
    get_triggers_config.cache_clear()


@pytest.fixture(autouse=True)
def drain_pending_callbacks():
    """Keep callbacks deferred outside an event loop from leaking between tests."""
    run_pending()
    yield
    run_pending()


class FakeTextHost:
    """In-memory text surface recording what a session pushes into it."""

    def __init__(self, value: str = "") -> None:
        self.current_value = value
        self.pushed: list[str] = []
        self.focus_requests = 0

    def replace_value(self, text: str) -> None:
        self.pushed.append(text)
        self.current_value = text

    def request_focus(self) -> None:
        self.focus_requests += 1


@pytest.fixture
def host():
    """An empty fake text host."""
    return FakeTextHost()


@pytest.fixture
def queue():
    """A manually driven scheduler."""
    return DeferredQueue()
