"""Wire models for the session-summary API."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from domain.models import SummaryResult


class ErrorResponse(BaseModel):
    """Body returned for failures before streaming starts."""

    error: str


class ProgressFrame(BaseModel):
    """Intermediate status update; extra fields carry stage metadata."""

    model_config = ConfigDict(extra="allow")

    type: Literal["progress"] = "progress"
    message: str


class ResultFrame(BaseModel):
    """Terminal frame carrying the finished summary."""

    type: Literal["result"] = "result"
    payload: SummaryResult


class ErrorFrame(BaseModel):
    """Terminal frame reporting a pipeline failure."""

    type: Literal["error"] = "error"
    message: str


StreamFrame = Annotated[
    ProgressFrame | ResultFrame | ErrorFrame, Field(discriminator="type")
]

stream_frame_adapter: TypeAdapter[StreamFrame] = TypeAdapter(StreamFrame)
