"""
Tests for the live-reload plumbing: event bus and source watcher.
"""

import os
import threading
from pathlib import Path

from mdpress.core.services.event_bus import EventBus
from mdpress.core.services.source_watcher import check_once, start_watcher

# ── EventBus ─────────────────────────────────────────────────────────


class TestEventBusPublish:
    def test_event_shape(self):
        bus = EventBus()
        event = bus.publish("doc:reload", key="notes.html", data={"title": "Notes"}, duration_s=0.1)
        assert event["v"] == 1
        assert event["seq"] == 1
        assert event["type"] == "doc:reload"
        assert event["key"] == "notes.html"
        assert event["data"] == {"title": "Notes"}
        assert event["duration_s"] == 0.1
        assert isinstance(event["ts"], float)

    def test_sequence_is_monotonic(self):
        bus = EventBus()
        seqs = [bus.publish("doc:reload")["seq"] for _ in range(3)]
        assert seqs == [1, 2, 3]
        assert bus.seq == 3

    def test_publish_without_subscribers(self):
        bus = EventBus()
        bus.publish("doc:error", error="boom")
        assert bus.subscriber_count == 0


class TestEventBusSubscribe:
    def test_first_event_is_ready(self):
        bus = EventBus()
        gen = bus.subscribe()
        ready = next(gen)
        assert ready["type"] == "sys:ready"
        assert ready["data"]["instance_id"] == bus.instance_id
        assert bus.subscriber_count == 1
        gen.close()
        assert bus.subscriber_count == 0

    def test_receives_published_events(self):
        bus = EventBus()
        gen = bus.subscribe()
        next(gen)
        bus.publish("doc:reload", key="a.html")
        event = next(gen)
        assert event["type"] == "doc:reload"
        assert event["key"] == "a.html"
        gen.close()

    def test_replay_since(self):
        bus = EventBus()
        first = bus.publish("doc:reload", key="1")
        bus.publish("doc:reload", key="2")
        bus.publish("doc:error", key="3")

        gen = bus.subscribe(since=first["seq"])
        assert next(gen)["type"] == "sys:ready"
        assert [next(gen)["key"] for _ in range(2)] == ["2", "3"]
        gen.close()

    def test_replay_buffer_is_bounded(self):
        bus = EventBus(buffer_size=2)
        for i in range(5):
            bus.publish("doc:reload", key=str(i))

        gen = bus.subscribe(since=1)
        next(gen)
        assert [next(gen)["key"] for _ in range(2)] == ["3", "4"]
        gen.close()

    def test_heartbeat_when_idle(self):
        bus = EventBus()
        gen = bus.subscribe(heartbeat_interval=0.01)
        next(gen)
        assert next(gen)["type"] == "sys:heartbeat"
        gen.close()

    def test_heartbeat_is_not_broadcast(self):
        bus = EventBus()
        idle = bus.subscribe(heartbeat_interval=0.01)
        other = bus.subscribe()
        next(idle)
        next(other)

        assert next(idle)["type"] == "sys:heartbeat"
        assert bus.history() == []

        bus.publish("doc:reload")
        assert next(other)["type"] == "doc:reload"
        idle.close()
        other.close()

    def test_history_since(self):
        bus = EventBus()
        for key in ("a", "b", "c"):
            bus.publish("doc:reload", key=key)
        assert [e["key"] for e in bus.history(since=1)] == ["b", "c"]
        assert len(bus.history()) == 3

    def test_full_subscriber_is_dropped(self):
        bus = EventBus(subscriber_queue_size=1)
        gen = bus.subscribe()
        next(gen)
        bus.publish("doc:reload")
        bus.publish("doc:reload")
        assert bus.subscriber_count == 0
        gen.close()


# ── Source watcher ───────────────────────────────────────────────────


class TestCheckOnce:
    def test_unchanged(self, tmp_path: Path):
        src = tmp_path / "doc.md"
        src.write_text("# A")
        os.utime(src, (1000, 1000))
        calls: list[Path] = []
        assert check_once(src, 1000.0, calls.append) == 1000.0
        assert calls == []

    def test_changed(self, tmp_path: Path):
        src = tmp_path / "doc.md"
        src.write_text("# A")
        os.utime(src, (2000, 2000))
        calls: list[Path] = []
        assert check_once(src, 1000.0, calls.append) == 2000.0
        assert calls == [src]

    def test_missing_file_keeps_last_mtime(self, tmp_path: Path):
        calls: list[Path] = []
        assert check_once(tmp_path / "gone.md", 1000.0, calls.append) == 1000.0
        assert calls == []

    def test_handler_failure_is_logged(self, tmp_path: Path, caplog):
        src = tmp_path / "doc.md"
        src.write_text("# A")
        os.utime(src, (2000, 2000))

        def boom(path):
            raise RuntimeError("handler broke")

        assert check_once(src, 1000.0, boom) == 2000.0
        assert "Change handler failed" in caplog.text


class TestStartWatcher:
    def test_detects_modification(self, tmp_path: Path):
        src = tmp_path / "doc.md"
        src.write_text("# A")
        os.utime(src, (1000, 1000))

        changed = threading.Event()
        stop = threading.Event()
        thread = start_watcher(src, lambda path: changed.set(), interval=0.01, stop=stop)
        assert thread.daemon

        try:
            for i in range(200):
                os.utime(src, (2000 + i, 2000 + i))
                if changed.wait(0.01):
                    break
            assert changed.is_set()
        finally:
            stop.set()
            thread.join(timeout=1)

        assert not thread.is_alive()
