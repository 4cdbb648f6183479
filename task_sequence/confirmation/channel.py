"""Messaging-backed confirmation source."""

from __future__ import annotations

import logging
import threading
import weakref

from task_sequence.messaging import REQUEST_TOPIC, RESPONSE_TOPIC, ConfirmationMessage, MessageBus

from .base import IConfirmationSource, IConfirmationTarget

logger = logging.getLogger("TaskSequence.Confirmation")


class ConfirmationChannel(IConfirmationSource):
    """Multiplex every live target of a process over one request/response topic pair.

    Targets are held weakly: once the owner drops an estimator its token is
    gone from the registry and any late response for it is counted as
    unmatched.
    """

    def __init__(
        self,
        bus: MessageBus,
        *,
        request_topic: str = REQUEST_TOPIC,
        response_topic: str = RESPONSE_TOPIC,
    ) -> None:
        self._bus = bus
        self._request_topic = request_topic
        self._response_topic = response_topic
        self._lock = threading.Lock()
        self._targets: weakref.WeakValueDictionary[str, IConfirmationTarget] = (
            weakref.WeakValueDictionary()
        )
        self._unmatched_count = 0
        self._bus.subscribe(self._response_topic, self._on_response)

    @property
    def request_topic(self) -> str:
        return self._request_topic

    @property
    def response_topic(self) -> str:
        return self._response_topic

    @property
    def unmatched_count(self) -> int:
        with self._lock:
            return self._unmatched_count

    def attach(self, target: IConfirmationTarget) -> None:
        with self._lock:
            self._targets[target.token] = target

    def detach(self, token: str) -> None:
        with self._lock:
            self._targets.pop(token, None)

    def is_attached(self, token: str) -> bool:
        with self._lock:
            return token in self._targets

    def live_tokens(self) -> list[str]:
        with self._lock:
            return list(self._targets.keys())

    def request(self, token: str, now: float) -> None:
        self._bus.publish(self._request_topic, token, time=now)
        logger.info("Confirmation requested with token %s", token)

    def _on_response(self, message: ConfirmationMessage) -> None:
        with self._lock:
            target = self._targets.get(message.token)
            if target is None:
                self._unmatched_count += 1
        if target is None:
            logger.warning("Received confirmation with unmatched token %s", message.token)
            return
        if target.confirm():
            logger.info("Confirmation received for token %s", message.token)
        else:
            logger.debug("Duplicate confirmation ignored for token %s", message.token)

    def close(self) -> None:
        self._bus.unsubscribe(self._response_topic, self._on_response)
        with self._lock:
            self._targets.clear()
