"""Read-only presence snapshot domain model."""

from pydantic import BaseModel, ConfigDict


class PresenceSnapshot(BaseModel):
    """Point-in-time view of the presence state.

    Only pages with at least one joiner appear in ``page_counts``.
    """

    model_config = ConfigDict(frozen=True)

    page_counts: dict[str, int]
    total_joiners: int
    connection_count: int
    monitored_page_count: int
