"""Client information domain model."""

from pydantic import BaseModel, ConfigDict


class ClientInfo(BaseModel):
    """Client information extracted from the connection scope."""

    model_config = ConfigDict(frozen=True)

    ip: str
    user_agent: str
