"""Descriptors handed to the data source by the protocol layer."""

from pydantic import BaseModel, ConfigDict, Field


class EdmEntitySet(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)

    def __str__(self) -> str:
        return self.name


class EdmFunctionImport(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)

    def __str__(self) -> str:
        return self.name
