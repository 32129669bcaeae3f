# courier_match/io/recorder.py
import json
import logging
import sys
from dataclasses import asdict
from typing import Protocol

log = logging.getLogger(__name__)


class Sink(Protocol):
    def write(self, ev) -> None: ...


class JsonlSink:
    """One compact JSON object per decision event; stderr unless a stream is given."""

    def __init__(self, fp=None):
        self.fp = fp

    def write(self, ev) -> None:
        fp = sys.stderr if self.fp is None else self.fp
        fp.write(json.dumps(asdict(ev), separators=(",", ":"), default=str) + "\n")
        fp.flush()


class MemorySink:
    def __init__(self):
        self.events: list = []

    def write(self, ev) -> None:
        self.events.append(ev)


class Recorder:
    def __init__(self, *sinks: Sink):
        self.sinks = sinks or (JsonlSink(),)

    def emit(self, ev):
        for s in self.sinks:
            try:
                s.write(ev)
            except (OSError, TypeError, ValueError):
                # analytics must never break a dispatch decision
                log.warning("sink %s dropped %s", type(s).__name__, type(ev).__name__, exc_info=True)
