"""Pre-handler events: run before every handler, may cancel the exchange."""

from perch.events.builtin import AccessLog
from perch.events.pipeline import EventPipeline
from perch.events.protocol import Cancellable, Event

__all__ = ["AccessLog", "Cancellable", "Event", "EventPipeline"]
