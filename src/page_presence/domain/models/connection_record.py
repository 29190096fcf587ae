"""Connection record domain model."""

from pydantic import BaseModel, ConfigDict


class ConnectionRecord(BaseModel):
    """A live transport session and the page it is counted on, if any."""

    model_config = ConfigDict(frozen=True)

    connection_id: str
    joined_page: str | None = None

    def with_joined_page(self, page_id: str | None) -> "ConnectionRecord":
        """Return a copy of this record counted on ``page_id`` (or on nothing)."""
        return self.model_copy(update={"joined_page": page_id})
