from __future__ import annotations

import json

import pytest

from task_sequence.messaging import ConfirmationMessage, MessageBus


def test_publish_routes_by_topic_and_assigns_sequence() -> None:
    bus = MessageBus()
    received: list[ConfirmationMessage] = []
    tapped: list[ConfirmationMessage] = []
    bus.subscribe("/a", received.append)
    bus.subscribe_all(tapped.append)

    first = bus.publish("/a", "tok-1", time=1.5)
    second = bus.publish("/b", "tok-2", time=2.0, payload={"note": "x"})

    assert [m.token for m in received] == ["tok-1"]
    assert [m.seq for m in tapped] == [0, 1]
    assert first.message_id == "msg-00000000"
    assert second.payload == {"note": "x"}
    assert json.loads(second.to_json())["topic"] == "/b"


def test_subscribe_is_idempotent_and_unsubscribe_stops_delivery() -> None:
    bus = MessageBus()
    received: list[str] = []

    def handler(message: ConfirmationMessage) -> None:
        received.append(message.token)

    bus.subscribe("/a", handler)
    bus.subscribe("/a", handler)
    bus.publish("/a", "one")
    bus.unsubscribe("/a", handler)
    bus.publish("/a", "two")

    assert received == ["one"]


def test_seeded_random_ids_are_reproducible() -> None:
    left = MessageBus(message_id_mode="seeded_random", message_id_seed=3)
    right = MessageBus(message_id_mode="seeded_random", message_id_seed=3)

    assert left.publish("/a", "t").message_id == right.publish("/a", "t").message_id


def test_unknown_message_id_mode_rejected() -> None:
    with pytest.raises(ValueError, match="message id mode"):
        MessageBus(message_id_mode="sequential")


def test_reset_clears_handlers_and_sequence() -> None:
    bus = MessageBus()
    received: list[str] = []
    bus.subscribe("/a", lambda message: received.append(message.token))
    bus.publish("/a", "x")
    bus.reset()

    message = bus.publish("/a", "y")

    assert received == ["x"]
    assert message.seq == 0
