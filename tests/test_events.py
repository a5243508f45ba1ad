"""Tests for the input thread and the event channel."""

import os
import time

import pytest

from app import App
from events import (
    EventChannel,
    Input,
    InputDecodeError,
    InputFailure,
    InputLoop,
    TerminalKeys,
    Tick,
    split_keys,
    start_input_loop,
)
from player import PlayerData


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class ScriptedKeys:
    """Key source driven by a fake clock.

    `script` maps poll number -> the keys read by that poll; the source fails after `polls` calls so
    the loop can be run to completion on the test thread.
    """

    def __init__(self, clock, script=None, polls=20):
        self.clock = clock
        self.script = dict(script or {})
        self.polls = polls
        self.timeouts = []
        self._pending = None

    def check(self):
        pass

    def poll(self, timeout):
        n = len(self.timeouts)
        if n >= self.polls:
            raise InputDecodeError("scripted end")
        self.timeouts.append(timeout)
        if n in self.script:
            self._pending = self.script[n]
            self.clock.now += 0.0625
            return True
        self.clock.now += timeout
        return False

    def read_keys(self):
        keys, self._pending = self._pending, None
        return list(keys)


class RecordingChannel:
    def __init__(self, clock):
        self.clock = clock
        self.events = []

    def publish(self, event):
        self.events.append((self.clock(), event))

    def publish_tick(self):
        self.events.append((self.clock(), Tick()))
        return True


class ListKeys:
    """Thread-friendly key source that hands out a fixed list of keys."""

    def __init__(self, keys):
        self.keys = list(keys)

    def check(self):
        pass

    def poll(self, timeout):
        if self.keys:
            return True
        time.sleep(timeout)
        return False

    def read_keys(self):
        return [self.keys.pop(0)]


# ===========================================================================
# EventChannel
# ===========================================================================


class TestEventChannel:
    def test_fifo_order(self):
        channel = EventChannel()
        for key in "abc":
            channel.publish(Input(key))
        assert [channel.recv().key for _ in range(3)] == ["a", "b", "c"]

    def test_ticks_coalesce_until_read(self):
        channel = EventChannel()
        assert channel.publish_tick() is True
        assert channel.publish_tick() is False
        channel.publish(Input("x"))
        assert channel.recv() == Tick()
        assert channel.recv() == Input("x")
        assert channel.publish_tick() is True


# ===========================================================================
# InputLoop
# ===========================================================================


class TestInputLoop:
    def test_ticks_are_spaced_by_tick_rate(self):
        clock = FakeClock()
        keys = ScriptedKeys(clock, polls=30)
        channel = RecordingChannel(clock)
        InputLoop(keys, channel, tick_rate=0.25, clock=clock)._run()

        ticks = [t for t, e in channel.events if isinstance(e, Tick)]
        assert len(ticks) >= 10
        gaps = [b - a for a, b in zip(ticks, ticks[1:])]
        assert all(gap >= 0.25 for gap in gaps)
        assert all(0 <= timeout <= 0.25 for timeout in keys.timeouts)

    def test_keys_published_in_order_between_ticks(self):
        clock = FakeClock()
        keys = ScriptedKeys(clock, script={1: "p", 2: " ", 5: "q"}, polls=8)
        channel = RecordingChannel(clock)
        InputLoop(keys, channel, tick_rate=0.25, clock=clock)._run()

        events = [e for _, e in channel.events]
        assert [e.key for e in events if isinstance(e, Input)] == ["p", " ", "q"]
        assert any(isinstance(e, Tick) for e in events)

    def test_poll_failure_is_published(self):
        clock = FakeClock()
        keys = ScriptedKeys(clock, polls=0)
        channel = RecordingChannel(clock)
        InputLoop(keys, channel, clock=clock)._run()

        (_, event), = channel.events
        assert isinstance(event, InputFailure)
        assert isinstance(event.error, InputDecodeError)

    def test_start_fails_without_terminal(self):
        class NoTerminal(ListKeys):
            def check(self):
                raise InputDecodeError("no tty")

        with pytest.raises(InputDecodeError):
            InputLoop(NoTerminal([]), EventChannel()).start()

    def test_thread_delivers_keys_in_order(self):
        channel = start_input_loop(ListKeys("hps q"), tick_rate=0.05)
        keys = []
        deadline = time.monotonic() + 5
        while len(keys) < 5 and time.monotonic() < deadline:
            event = channel.recv()
            if isinstance(event, Input):
                keys.append(event.key)
        assert keys == ["h", "p", "s", " ", "q"]

    def test_thread_keeps_ticking_without_input(self):
        channel = start_input_loop(ListKeys([]), tick_rate=0.02)
        assert channel.recv() == Tick()
        assert channel.recv() == Tick()

    def test_keys_read_together_become_separate_events(self):
        clock = FakeClock()
        keys = ScriptedKeys(clock, script={0: "p   ", 3: ["\x1b[A", "q"]}, polls=5)
        channel = RecordingChannel(clock)
        InputLoop(keys, channel, tick_rate=0.25, clock=clock)._run()

        events = [e for _, e in channel.events]
        assert [e.key for e in events if isinstance(e, Input)] == ["p", " ", " ", " ", "\x1b[A", "q"]

    def test_unexpected_error_becomes_decode_error(self):
        class Broken(ListKeys):
            def poll(self, timeout):
                raise RuntimeError("boom")

        channel = RecordingChannel(FakeClock())
        InputLoop(Broken([]), channel)._run()

        (_, event), = channel.events
        assert isinstance(event.error, InputDecodeError)
        assert isinstance(event.error.__cause__, RuntimeError)


# ===========================================================================
# Terminal key source
# ===========================================================================


def pipe_keys(data):
    """Write `data` into a pipe and read every key back out of it."""
    r, w = os.pipe()
    try:
        os.write(w, data)
        os.close(w)
        w = None
        source = TerminalKeys(r)
        keys = []
        while source.poll(0):
            try:
                keys.extend(source.read_keys())
            except InputDecodeError:
                break  # writer closed
        return keys
    finally:
        os.close(r)
        if w is not None:
            os.close(w)


class TestTerminalKeys:
    @pytest.mark.parametrize(
        "text, keys",
        [
            ("q", ["q"]),
            ("p   ", ["p", " ", " ", " "]),
            ("\x1b[Aq", ["\x1b[A", "q"]),
            ("\x1bOBh", ["\x1bOB", "h"]),
            ("\x1b[5~ ", ["\x1b[5~", " "]),
            ("\x1bq", ["\x1b", "q"]),
            ("\x1b", ["\x1b"]),
            ("é ", ["é", " "]),
            ("", []),
        ],
    )
    def test_split_keys(self, text, keys):
        assert split_keys(text) == keys

    def test_every_key_in_one_read_is_kept(self):
        assert pipe_keys(b"p   ") == ["p", " ", " ", " "]
        assert pipe_keys(b"\x1b[Aq") == ["\x1b[A", "q"]

    def test_fast_typing_counts_every_prayer(self, tmp_path):
        app = App(PlayerData(), str(tmp_path / "player_data.json"))
        for key in pipe_keys(b"p   "):
            app.handle(Input(key))
        assert app.player.prays == 3

    def test_multibyte_character_split_across_reads(self):
        r, w = os.pipe()
        try:
            source = TerminalKeys(r)
            os.write(w, "é".encode("utf-8")[:1])
            assert source.read_keys() == []
            os.write(w, "é".encode("utf-8")[1:] + b"q")
            assert source.read_keys() == ["é", "q"]
        finally:
            os.close(r)
            os.close(w)

    def test_closed_writer_is_decode_error(self):
        r, w = os.pipe()
        os.close(w)
        try:
            with pytest.raises(InputDecodeError):
                TerminalKeys(r).read_keys()
        finally:
            os.close(r)

    def test_pipe_is_not_a_terminal(self):
        r, w = os.pipe()
        try:
            with pytest.raises(InputDecodeError):
                TerminalKeys(r).check()
        finally:
            os.close(r)
            os.close(w)

    def test_poll_and_read(self):
        r, w = os.pipe()
        try:
            keys = TerminalKeys(r)
            assert keys.poll(0) is False
            os.write(w, b"p")
            assert keys.poll(1.0) is True
            assert keys.read_keys() == ["p"]
        finally:
            os.close(r)
            os.close(w)

    def test_poll_closed_fd(self):
        r, w = os.pipe()
        os.close(r)
        os.close(w)
        with pytest.raises(InputDecodeError):
            TerminalKeys(r).poll(0)
