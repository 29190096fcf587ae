"""Inbound transport messages."""

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class _PageMessage(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    page_id: str = Field(validation_alias=AliasChoices("pageId", "pagePath", "page_id"))


class JoinMessage(_PageMessage):
    """Sent by a counted client to be counted on a page."""

    event: Literal["join", "join-page"]


class MonitorMessage(_PageMessage):
    """Sent by an observing client to receive counts without being counted."""

    event: Literal["monitor", "monitor-page"]


InboundMessage = JoinMessage | MonitorMessage
