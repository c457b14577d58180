"""Tests for deferred callback scheduling."""

import asyncio
import threading

import pytest

from mentionkit.config import TriggerConfig
from mentionkit.models import MentionSuggestion
from mentionkit.session import DeferredQueue, MentionSession, call_soon, run_pending


class TestDeferredQueue:
    """Tests for DeferredQueue."""

    def test_runs_only_when_pumped(self):
        """Test callbacks wait for run_pending."""
        queue = DeferredQueue()
        calls = []
        queue(lambda: calls.append(1))

        assert calls == []
        assert len(queue) == 1
        assert queue.run_pending() == 1
        assert calls == [1]
        assert len(queue) == 0

    def test_rescheduled_callbacks_wait(self):
        """Test callbacks queued while running wait for the next pump."""
        queue = DeferredQueue()
        calls = []
        queue(lambda: queue(lambda: calls.append("second")))

        queue.run_pending()
        assert calls == []
        queue.run_pending()
        assert calls == ["second"]

    def test_failing_callback_does_not_stop_others(self):
        """Test errors are logged and the queue keeps draining."""
        queue = DeferredQueue()
        calls = []

        def boom():
            raise RuntimeError("boom")

        queue(boom)
        queue(lambda: calls.append(1))
        assert queue.run_pending() == 2
        assert calls == [1]


class TestCallSoon:
    """Tests for call_soon function."""

    @pytest.mark.asyncio
    async def test_uses_running_loop(self):
        """Test the callback runs on the next loop iteration, not inline."""
        calls = []
        call_soon(lambda: calls.append(1))

        assert calls == []
        await asyncio.sleep(0)
        assert calls == [1]

    def test_without_loop_waits_for_run_pending(self):
        """Test the callback waits for the host to pump when no loop runs."""
        threads = []
        call_soon(lambda: threads.append(threading.get_ident()))

        assert threads == []
        assert run_pending() == 1
        assert threads == [threading.get_ident()]
        assert run_pending() == 0

    def test_session_without_loop(self, host):
        """Test the default scheduler lifts the suppression window on pump."""
        session = MentionSession([TriggerConfig(symbol="@")])
        session.register_host(host)
        host.current_value = "@jo"
        session.on_text_or_selection_change("@jo", 3)
        session.commit_mention(MentionSuggestion(id="u1", name="John", symbol="@"))

        assert session.is_inserting is True
        run_pending()
        assert session.is_inserting is False
