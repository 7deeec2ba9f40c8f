"""
Tests for the bounded output channel and the PID registry.
"""

import threading
import time

import pytest

from mvnctl.core.process import OutputChannel, PidRegistry, ProcessUpdate, UpdateKind


class TestOutputChannel:
    """Test ordering, capacity and the single terminal update."""

    def test_lines_then_terminal_in_order(self):
        channel = OutputChannel(maxsize=10)
        channel.put_line("one")
        channel.put_line("two")
        channel.close(ProcessUpdate.exited(0))

        updates = channel.poll()
        assert [u.kind for u in updates] == [UpdateKind.OUTPUT, UpdateKind.OUTPUT, UpdateKind.EXITED]
        assert [u.line for u in updates[:2]] == ["one", "two"]
        assert channel.finished

    def test_only_first_close_counts(self):
        channel = OutputChannel()
        assert channel.close(ProcessUpdate.killed()) is True
        assert channel.close(ProcessUpdate.exited(1)) is False
        assert channel.terminal.kind is UpdateKind.KILLED
        assert [u.kind for u in channel.poll()] == [UpdateKind.KILLED]

    def test_lines_after_close_are_rejected(self):
        channel = OutputChannel()
        channel.close(ProcessUpdate.exited(0))
        assert channel.put_line("late") is False
        assert len(channel) == 1

    def test_close_requires_terminal_update(self):
        with pytest.raises(ValueError):
            OutputChannel().close(ProcessUpdate.output("x"))

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            OutputChannel(maxsize=0)

    def test_poll_respects_max_items(self):
        channel = OutputChannel()
        for i in range(5):
            channel.put_line(str(i))
        assert [u.line for u in channel.poll(2)] == ["0", "1"]
        assert len(channel) == 3

    def test_poll_never_blocks(self):
        assert OutputChannel().poll() == []

    def test_full_channel_blocks_producer_until_drained(self):
        channel = OutputChannel(maxsize=2)
        channel.put_line("a")
        channel.put_line("b")
        assert channel.put_line("c", timeout=0.05) is False

        done = threading.Event()

        def producer():
            channel.put_line("c")
            done.set()

        thread = threading.Thread(target=producer)
        thread.start()
        time.sleep(0.05)
        assert not done.is_set()

        channel.poll(1)
        assert done.wait(2.0)
        thread.join(2.0)
        assert [u.line for u in channel.poll()] == ["b", "c"]

    def test_close_on_full_channel_releases_blocked_producer(self):
        channel = OutputChannel(maxsize=1)
        channel.put_line("a")
        results = []
        thread = threading.Thread(target=lambda: results.append(channel.put_line("b")))
        thread.start()
        time.sleep(0.05)

        channel.close(ProcessUpdate.killed())
        thread.join(2.0)

        assert results == [False]
        assert [u.kind for u in channel.poll()] == [UpdateKind.OUTPUT, UpdateKind.KILLED]

    def test_get_times_out(self):
        assert OutputChannel().get(timeout=0.01) is None


class TestPidRegistry:
    """Test slot PID tracking and kill-in-flight coordination."""

    def test_register_and_unregister(self):
        registry = PidRegistry()
        registry.register("app", 100)
        registry.register("api", 200)
        assert registry.snapshot() == {"app": 100, "api": 200}

        registry.unregister("app", pid=999)
        assert registry.pid_for("app") == 100

        registry.unregister("app", pid=100)
        assert registry.pid_for("app") is None

    def test_wait_for_kill_without_pending_kill(self):
        assert PidRegistry().wait_for_kill("app", timeout=0.01)

    def test_wait_for_kill_times_out(self):
        registry = PidRegistry()
        registry.begin_kill("app")
        assert registry.kill_in_flight("app")
        assert registry.wait_for_kill("app", timeout=0.01) is False

    def test_end_kill_releases_waiters(self):
        registry = PidRegistry()
        registry.begin_kill("app")
        timer = threading.Timer(0.05, registry.end_kill, args=("app",))
        timer.start()
        assert registry.wait_for_kill("app", timeout=2.0)
        assert not registry.kill_in_flight("app")
        timer.join()
