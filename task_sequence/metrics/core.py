"""Default confirmation metrics."""

from __future__ import annotations

from collections import defaultdict

from task_sequence.messaging import REQUEST_TOPIC, RESPONSE_TOPIC, ConfirmationMessage

from .base import IMetric


class ConfirmationMetrics(IMetric):
    """Aggregate request/response traffic from the message stream.

    A response on the wire is not a confirmation: whether it reached a live
    estimator is only known to the confirmation source, so matched
    confirmations are reported by the tracking engine instead.
    """

    def __init__(
        self,
        *,
        request_topic: str = REQUEST_TOPIC,
        response_topic: str = RESPONSE_TOPIC,
    ) -> None:
        self._request_topic = request_topic
        self._response_topic = response_topic
        self.reset()

    def reset(self) -> None:
        self._request_counts: dict[str, int] = defaultdict(int)
        self._responses_published = 0
        self._orphan_responses = 0
        self._message_count = 0
        self._max_time = 0.0

    def consume(self, message: ConfirmationMessage) -> None:
        self._message_count += 1
        self._max_time = max(self._max_time, message.time)

        if message.topic == self._request_topic:
            self._request_counts[message.token] += 1
        elif message.topic == self._response_topic:
            self._responses_published += 1
            if message.token not in self._request_counts:
                self._orphan_responses += 1

    def report(self) -> dict:
        return {
            "tokens_requested": len(self._request_counts),
            "requests_published": sum(self._request_counts.values()),
            "responses_published": self._responses_published,
            "orphan_responses": self._orphan_responses,
            "message_count": self._message_count,
            "max_time": self._max_time,
        }
