"""
Host services handed to extractors: the findings store, the message inbox
and the module data-event bus.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from .enums import ArtifactType, MessageType
from .findings import FindingsStore
from .logging import get_logger

LOGGER = get_logger("core.services")


@dataclass(frozen=True, slots=True)
class IngestMessage:
    """A message posted to the ingest inbox."""

    message_id: int
    message_type: MessageType
    module_name: str
    subject: str
    body: str = ""


@dataclass(frozen=True, slots=True)
class ModuleDataEvent:
    """Notification that new artifacts of a type are available."""

    module_name: str
    artifact_type: ArtifactType


class MessageIdCounter:
    """Monotonic message id allocator; safe to share across threads."""

    def __init__(self, start: int = 0) -> None:
        self._value = start
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def current(self) -> int:
        with self._lock:
            return self._value


MessageListener = Callable[[IngestMessage], None]
EventListener = Callable[[ModuleDataEvent], None]


class IngestServices:
    """
    Services shared by every extractor in a run.

    Posted messages and fired events are kept in order (``messages`` /
    ``events``) and forwarded to any registered listeners. Listener failures
    are logged and never reach the poster.
    """

    def __init__(self, findings: FindingsStore) -> None:
        self.findings = findings
        self.messages: List[IngestMessage] = []
        self.events: List[ModuleDataEvent] = []
        self._message_listeners: List[MessageListener] = []
        self._event_listeners: List[EventListener] = []
        self._lock = threading.Lock()

    def add_message_listener(self, listener: MessageListener) -> None:
        self._message_listeners.append(listener)

    def add_event_listener(self, listener: EventListener) -> None:
        self._event_listeners.append(listener)

    def post_message(self, message: IngestMessage) -> None:
        with self._lock:
            self.messages.append(message)
        LOGGER.info("[%s] %s: %s", message.message_type, message.module_name, message.subject)
        for listener in list(self._message_listeners):
            try:
                listener(message)
            except Exception:
                LOGGER.exception("Message listener failed for message %d", message.message_id)

    def fire_module_data_event(self, event: ModuleDataEvent) -> None:
        with self._lock:
            self.events.append(event)
        LOGGER.debug("Data event from %s: %s", event.module_name, event.artifact_type)
        for listener in list(self._event_listeners):
            try:
                listener(event)
            except Exception:
                LOGGER.exception("Event listener failed for %s", event.module_name)

    def last_message(self) -> Optional[IngestMessage]:
        with self._lock:
            return self.messages[-1] if self.messages else None
