"""Error details domain model."""

from pydantic import BaseModel, ConfigDict


class ErrorDetails(BaseModel):
    """Details about a failed fetch, including HTTP status code if applicable."""

    model_config = ConfigDict(frozen=True)

    kind: str
    status_code: int | None = None
    reason: str
