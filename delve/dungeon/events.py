"""Completion notifications fired by the generation pipeline.

Handlers are registered per event name and called in registration order
with a single ``stage`` keyword. ``generation_complete`` fires twice per
run: once after connectivity resolution and once after flood fill.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Callable, DefaultDict, List

from ..logging_utils import get_logger

_log = get_logger("dungeon.events")

GENERATION_COMPLETE = "generation_complete"
STAGE_CONNECTIVITY = "connectivity"
STAGE_FLOOD_FILL = "flood_fill"

Handler = Callable[..., None]


class GenerationEvents:
    def __init__(self) -> None:
        self._subs: DefaultDict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, event_name: str, handler: Handler) -> None:
        if not callable(handler):
            raise TypeError("handler must be callable")
        self._subs[event_name].append(handler)

    def unsubscribe(self, event_name: str, handler: Handler) -> None:
        if handler in self._subs.get(event_name, []):
            self._subs[event_name].remove(handler)

    def emit(self, event_name: str, stage: str) -> int:
        """Call every handler for ``event_name``; returns how many ran."""
        subs = list(self._subs.get(event_name, []))
        _log.debug(event="emit", name=event_name, stage=stage, subscribers=len(subs))
        for handler in subs:
            handler(stage=stage)
        return len(subs)


__all__ = [
    "GenerationEvents",
    "GENERATION_COMPLETE",
    "STAGE_CONNECTIVITY",
    "STAGE_FLOOD_FILL",
]
