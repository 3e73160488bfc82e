"""Endpoint registry models.

Applications describe their HTTP surface with these records; the
exporter turns them into an OpenAPI document.
"""

from typing import Any

from pydantic import BaseModel, Field

CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_XML = "application/xml"
CONTENT_TYPE_TEXT = "text/plain"
CONTENT_TYPE_HTML = "text/html"


class Tag(BaseModel):
    """A named group of operations."""

    name: str
    description: str = ""


class Example(BaseModel):
    """A sample payload shown next to a request or response schema."""

    summary: str = ""
    description: str = ""
    value: Any = None


class Request(BaseModel):
    """The request side of an endpoint.

    ``model`` is a model class, a type annotation such as ``list[User]``,
    an instance, or None when the endpoint takes no body.
    """

    description: str = ""
    required: bool = False
    content_type: list[str] = []
    model: Any = None
    examples: list[Example] = []


class Response(BaseModel):
    """One possible response of an endpoint, keyed by status code."""

    description: str = ""
    code: int = 200
    content_type: list[str] = []
    model: Any = None
    examples: list[Example] = []


class Path(BaseModel):
    """A single method on a single URL."""

    summary: str = ""
    description: str = ""
    url: str = ""
    method: str = ""  # GET / POST / PUT / DELETE / PATCH
    tags: list[Tag] = []
    request: Request = Field(default_factory=Request)
    responses: list[Response] = []
    handler: Any = None  # opaque, never called by oasgen


class Api(BaseModel):
    """Ordered registry of endpoints plus document metadata."""

    title: str
    summary: str = ""
    description: str = ""
    version: str = ""
    paths: list[Path] = []

    def new_endpoint(self, method: str, url: str, path: Path | None = None) -> Path:
        """Register *path* under *method* and *url* and return it."""
        path = path.model_copy() if path is not None else Path()
        path.method = method
        path.url = url
        self.paths.append(path)
        return path

    def to_document(self, settings=None):
        """Assemble the OpenAPI document for every registered endpoint."""
        from oasgen.exporter.assemble import assemble

        return assemble(self.title, self.description, self.version, self.paths, settings=settings)
