from pydantic import BaseModel, Field


class ServiceDocument(BaseModel):
    """Entity sets exposed by the service."""

    entity_sets: list[str] = Field(default_factory=list)
