"""Tests for core.services (messages, events, id counter)."""

import threading

from core.enums import ArtifactType, MessageType
from core.services import IngestMessage, MessageIdCounter, ModuleDataEvent


def test_counter_starts_at_one():
    counter = MessageIdCounter()
    assert counter.next_id() == 1
    assert counter.next_id() == 2
    assert counter.current == 2


def test_counter_is_thread_safe():
    counter = MessageIdCounter()
    results = []
    lock = threading.Lock()

    def worker():
        ids = [counter.next_id() for _ in range(500)]
        with lock:
            results.extend(ids)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(results) == list(range(1, 4001))


def test_messages_recorded_and_forwarded(services):
    received = []
    services.add_message_listener(received.append)
    message = IngestMessage(1, MessageType.INFO, "RecentActivity", "Started image1")

    services.post_message(message)

    assert services.messages == [message]
    assert received == [message]
    assert services.last_message() is message


def test_listener_failure_is_contained(services):
    def broken(_):
        raise RuntimeError("listener bug")

    received = []
    services.add_message_listener(broken)
    services.add_message_listener(received.append)
    services.add_event_listener(broken)

    services.post_message(IngestMessage(1, MessageType.ERROR, "m", "s"))
    services.fire_module_data_event(ModuleDataEvent("Exif Parser", ArtifactType.METADATA_EXIF))

    assert len(received) == 1
    assert services.events == [ModuleDataEvent("Exif Parser", ArtifactType.METADATA_EXIF)]


def test_last_message_empty(services):
    assert services.last_message() is None
