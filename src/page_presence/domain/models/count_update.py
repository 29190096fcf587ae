"""Count update domain model (the only outbound event)."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

COUNT_UPDATE_EVENT = "countUpdate"


class CountUpdate(BaseModel):
    """Current number of joiners on a page."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page_id: str = Field(alias="pageId")
    count: int = Field(ge=0)

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON payload sent to clients."""
        return {"event": COUNT_UPDATE_EVENT, **self.model_dump(by_alias=True)}
