"""
Text control channel — runtime adjustment of goo and threshold.

Lines have the form ``<selector><float>``:

    g2.5    set goo to 2.5
    t0.8    set threshold to 0.8

A background thread reads lines (stdin by default), parses them into
commands and hands them to the display loop through a
:class:`CommandChannel`, which the loop polls without blocking.
"""

from __future__ import annotations

import logging
import queue
import sys
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, TextIO, Union

if TYPE_CHECKING:
    from .field import MetaballField

logger = logging.getLogger(__name__)


GOO_SELECTOR = "g"
THRESHOLD_SELECTOR = "t"


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SetGoo:
    """Adjust the goo exponent."""
    value: float

    def apply(self, metaballs: "MetaballField") -> None:
        metaballs.goo = self.value


@dataclass(frozen=True)
class SetThreshold:
    """Adjust the threshold."""
    value: float

    def apply(self, metaballs: "MetaballField") -> None:
        metaballs.threshold = self.value


ControlCommand = Union[SetGoo, SetThreshold]


class CommandParseError(ValueError):
    """A control line could not be turned into a command."""


class ChannelDisconnected(RuntimeError):
    """The command producer went away."""


def _parse_float(text: str) -> float:
    # float() is looser than the line grammar: no padding, no digit separators
    if text != text.strip() or "_" in text:
        raise CommandParseError(f'Unable to parse to float "{text}"')
    try:
        return float(text)
    except ValueError:
        raise CommandParseError(f'Unable to parse to float "{text}"') from None


def parse_command(line: str) -> Optional[ControlCommand]:
    """Parse one control line.

    Returns None for a blank line.

    Raises:
        CommandParseError: unknown selector or a value that is not a float.
    """
    line = line.strip()
    if not line:
        return None

    selector, rest = line[0], line[1:]
    if selector == GOO_SELECTOR:
        return SetGoo(_parse_float(rest))
    if selector == THRESHOLD_SELECTOR:
        return SetThreshold(_parse_float(rest))
    raise CommandParseError("Unknown command.")


# ---------------------------------------------------------------------------
# Channel
# ---------------------------------------------------------------------------

class CommandChannel:
    """Single-producer / single-consumer command queue.

    The consumer polls with :meth:`try_receive`, which never blocks.
    Once the producer has disconnected and the queue is drained, polling
    raises :class:`ChannelDisconnected`.
    """

    def __init__(self) -> None:
        self._queue: "queue.Queue[ControlCommand]" = queue.Queue()
        self._disconnected = threading.Event()

    @property
    def disconnected(self) -> bool:
        return self._disconnected.is_set()

    def send(self, command: ControlCommand) -> None:
        if self.disconnected:
            raise ChannelDisconnected("Cannot send on a disconnected channel")
        self._queue.put(command)

    def disconnect(self) -> None:
        self._disconnected.set()

    def try_receive(self) -> Optional[ControlCommand]:
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            if self.disconnected:
                raise ChannelDisconnected("Command producer hung up") from None
            return None


# ---------------------------------------------------------------------------
# Reader thread
# ---------------------------------------------------------------------------

class CommandReader(threading.Thread):
    """Reads control lines from *stream* and sends commands on *channel*.

    Parse errors are reported and skipped.  End of input stops the
    reader but leaves the channel connected; any other failure
    disconnects it.
    """

    def __init__(self, channel: CommandChannel, stream: Optional[TextIO] = None) -> None:
        super().__init__(name="command-reader", daemon=True)
        self.channel = channel
        self.stream = stream if stream is not None else sys.stdin

    def handle_line(self, line: str) -> Optional[ControlCommand]:
        try:
            command = parse_command(line)
        except CommandParseError as exc:
            logger.warning("%s", exc)
            return None
        if command is not None:
            self.channel.send(command)
        return command

    def run(self) -> None:
        try:
            for line in self.stream:
                self.handle_line(line)
        except Exception:
            logger.exception("Command reader failed")
            self.channel.disconnect()
            return
        logger.info("Control input closed; no further commands will be read")
