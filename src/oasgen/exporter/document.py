"""OpenAPI document models.

These mirror the subset of OpenAPI 3.0 that oasgen emits. ``to_dict``
produces the structure handed to the YAML/JSON encoders.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from oasgen.schema.model import Schema


class _Node(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Info(_Node):
    title: str
    description: str = ""
    version: str = ""


class Example(_Node):
    summary: str = ""
    description: str = ""
    value: Any = None


class MediaType(_Node):
    """Schema and examples served under one content type."""

    schema_: Schema | None = Field(None, alias="schema")
    examples: dict[str, Example] | None = None


class Parameter(_Node):
    """A query, header or cookie parameter."""

    name: str
    in_: str = Field(alias="in")  # query / header / cookie
    description: str = ""
    required: bool = False
    schema_: Schema | None = Field(None, alias="schema")
    content: dict[str, MediaType] | None = None


class Header(_Node):
    description: str = ""
    schema_: Schema = Field(alias="schema")


class RequestBody(_Node):
    description: str = ""
    # omitted unless true
    required: bool | None = None
    content: dict[str, MediaType] = {}


class ResponseObject(_Node):
    description: str = ""
    content: dict[str, MediaType] | None = None
    headers: dict[str, Header] | None = None


class Operation(_Node):
    """One HTTP method on one path."""

    summary: str = ""
    description: str = ""
    parameters: list[Parameter] = []
    request_body: RequestBody | None = Field(None, alias="requestBody")
    responses: dict[int, ResponseObject] = {}
    tags: list[str] = []


class TagObject(_Node):
    name: str
    description: str = ""


class Document(_Node):
    """A complete OpenAPI document, before text encoding."""

    openapi: str = "3.0.3"
    info: Info
    paths: dict[str, dict[str, Operation]] = {}
    tags: list[TagObject] = []

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
