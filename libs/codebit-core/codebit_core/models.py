"""Core data models for CodeBit sync."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class CodeBitDescriptor(BaseModel):
    """Validated view of a CodeBit metadata block."""

    model_config = ConfigDict(frozen=True)

    name: str | None = Field(default=None, description="File name of the CodeBit")
    description: str | None = Field(default=None)
    keywords: list[str] = Field(default_factory=list, description="Keyword tokens, in order")
    version: str = Field(description="Opaque version string (mixed alphanumeric order)")
    url: str = Field(description="Location of the master copy")


class VersionOrder(Enum):
    """How a master copy's version relates to the local copy's."""

    LOCAL_NEWER = "local_newer"
    EQUAL = "equal"
    REMOTE_NEWER = "remote_newer"
