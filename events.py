# events.py
import codecs
import os
import queue
import select
import sys
import threading
import time
from dataclasses import dataclass

from utils import get_logger

logger = get_logger(__name__)

TICK_RATE = 0.2  # seconds
READ_SIZE = 64

ESC = "\x1b"
CSI_STARTS = "[O"


class InputDecodeError(Exception):
    pass


@dataclass(frozen=True)
class Input:
    key: str


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class InputFailure:
    error: Exception


class EventChannel:
    """FIFO between the input thread and the main loop.

    Ticks coalesce: while one is still unread a new one is dropped, so a slow
    consumer never finds a backlog of heartbeats.
    """

    def __init__(self):
        self._queue = queue.Queue()
        self._lock = threading.Lock()
        self._tick_pending = False

    def publish(self, event):
        self._queue.put_nowait(event)

    def publish_tick(self):
        with self._lock:
            if self._tick_pending:
                return False
            self._tick_pending = True
            self._queue.put_nowait(Tick())
        return True

    def recv(self):
        event = self._queue.get()
        if isinstance(event, Tick):
            with self._lock:
                self._tick_pending = False
        return event


def split_keys(text):
    """Split decoded terminal input into keys, one escape sequence per key."""
    keys = []
    i = 0
    while i < len(text):
        start = i
        i += 1
        if text[start] == ESC and i < len(text) and text[i] in CSI_STARTS:
            i += 1
            # parameter bytes run until the final byte @..~
            while i < len(text) and not "\x40" <= text[i] <= "\x7e":
                i += 1
            i = min(i + 1, len(text))
        keys.append(text[start:i])
    return keys


class TerminalKeys:
    """Reads keys straight from the tty file descriptor (POSIX only)."""

    def __init__(self, fd=None):
        self.fd = sys.stdin.fileno() if fd is None else fd
        # keeps a multi-byte character split across two reads intact
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def check(self):
        if not os.isatty(self.fd):
            raise InputDecodeError(f"fd {self.fd} is not a terminal")

    def poll(self, timeout):
        try:
            readable, _, _ = select.select([self.fd], [], [], timeout)
        except (OSError, ValueError) as e:
            raise InputDecodeError(f"cannot poll terminal: {e}") from e
        return bool(readable)

    def read_keys(self):
        try:
            data = os.read(self.fd, READ_SIZE)
        except OSError as e:
            raise InputDecodeError(f"cannot read terminal: {e}") from e
        if not data:
            raise InputDecodeError("terminal closed")
        return split_keys(self._decoder.decode(data))


class InputLoop:
    def __init__(self, keys, channel, tick_rate=TICK_RATE, clock=time.monotonic):
        self.keys = keys
        self.channel = channel
        self.tick_rate = tick_rate
        self.clock = clock
        self._thread = threading.Thread(target=self._run, daemon=True, name="input-loop")

    def start(self):
        # fails here, on the caller's thread, when there is no terminal
        self.keys.check()
        self._thread.start()
        return self

    def _run(self):
        try:
            self._poll_forever()
        except InputDecodeError as e:
            logger.error("input loop stopped: %s", e)
            self.channel.publish(InputFailure(e))
        except Exception as e:
            logger.exception("input loop crashed")
            error = InputDecodeError(f"input loop crashed: {e!r}")
            error.__cause__ = e
            self.channel.publish(InputFailure(error))

    def _poll_forever(self):
        last_tick = self.clock()
        while True:
            timeout = max(0.0, self.tick_rate - (self.clock() - last_tick))
            if self.keys.poll(timeout):
                for key in self.keys.read_keys():
                    self.channel.publish(Input(key))
            if self.clock() - last_tick >= self.tick_rate:
                self.channel.publish_tick()
                last_tick = self.clock()


def start_input_loop(keys=None, tick_rate=TICK_RATE):
    channel = EventChannel()
    if keys is None:
        keys = TerminalKeys()
    InputLoop(keys, channel, tick_rate).start()
    return channel
