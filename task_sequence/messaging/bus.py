"""Topic message bus with sequence assignment."""

from __future__ import annotations

from collections import defaultdict
import random
import threading
import uuid
from typing import Callable

from .types import ConfirmationMessage


MessageHandler = Callable[[ConfirmationMessage], None]


class MessageBus:
    """In-process topic pub/sub shared by every estimator of a process.

    Handlers run on the publishing thread, outside the bus lock.
    """

    VALID_MESSAGE_ID_MODES = {"deterministic", "random", "seeded_random"}

    def __init__(
        self,
        *,
        message_id_mode: str = "deterministic",
        message_id_seed: int | None = None,
    ) -> None:
        mode = message_id_mode.lower().strip()
        if mode not in self.VALID_MESSAGE_ID_MODES:
            raise ValueError(f"unknown message id mode {message_id_mode}")
        self._lock = threading.Lock()
        self._handlers: dict[str, list[MessageHandler]] = defaultdict(list)
        self._taps: list[MessageHandler] = []
        self._seq = 0
        self._message_id_mode = mode
        self._rng = random.Random(message_id_seed)

    def subscribe(self, topic: str, handler: MessageHandler) -> None:
        with self._lock:
            if handler not in self._handlers[topic]:
                self._handlers[topic].append(handler)

    def unsubscribe(self, topic: str, handler: MessageHandler) -> None:
        with self._lock:
            handlers = self._handlers.get(topic, [])
            if handler in handlers:
                handlers.remove(handler)

    def subscribe_all(self, handler: MessageHandler) -> None:
        """Observe every message regardless of topic."""
        with self._lock:
            if handler not in self._taps:
                self._taps.append(handler)

    def _next_message_id(self, seq: int) -> str:
        if self._message_id_mode == "random":
            return str(uuid.uuid4())
        if self._message_id_mode == "seeded_random":
            value = self._rng.getrandbits(128)
            return f"{value:032x}"
        return f"msg-{seq:08d}"

    def publish(
        self,
        topic: str,
        token: str,
        *,
        time: float = 0.0,
        payload: dict | None = None,
    ) -> ConfirmationMessage:
        with self._lock:
            seq = self._seq
            self._seq += 1
            message_id = self._next_message_id(seq)
            handlers = list(self._handlers.get(topic, [])) + list(self._taps)
        message = ConfirmationMessage(
            message_id=message_id,
            seq=seq,
            topic=topic,
            token=token,
            time=max(0.0, time),
            payload=payload or {},
        )
        for handler in handlers:
            handler(message)
        return message

    def reset(self) -> None:
        with self._lock:
            self._seq = 0
            self._handlers.clear()
            self._taps.clear()
