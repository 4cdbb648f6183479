"""Confirmation message definitions."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


REQUEST_TOPIC = "/request_confirmation"
RESPONSE_TOPIC = "/confirmation_received"


class ConfirmationMessage(BaseModel):
    """Envelope carrying one correlation token on a topic."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    message_id: str
    seq: int = Field(ge=0)
    topic: str
    token: str
    time: float = Field(ge=0)
    payload: dict[str, Any] = Field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(self.model_dump(mode="json"), ensure_ascii=False)
