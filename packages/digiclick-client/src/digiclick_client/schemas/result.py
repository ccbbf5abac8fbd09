"""Uniform result shape returned by every client call."""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field


class JsonBody(BaseModel):
    """Response body declared as application/json."""

    kind: Literal["json"] = "json"
    value: Any = None


class TextBody(BaseModel):
    """Any other response body, kept as decoded text."""

    kind: Literal["text"] = "text"
    value: str = ""


ResponseBody = Annotated[Union[JsonBody, TextBody], Field(discriminator="kind")]


class ApiSuccess(BaseModel):
    """A 2xx response from the server."""

    success: Literal[True] = True
    body: ResponseBody
    status: int
    headers: dict[str, str] = Field(default_factory=dict)

    @property
    def data(self) -> Any:
        return self.body.value


class ApiFailure(BaseModel):
    """Any failure: local rejection, timeout, network error or non-2xx response."""

    success: Literal[False] = False
    error: str
    status: int


ApiResult = Union[ApiSuccess, ApiFailure]
