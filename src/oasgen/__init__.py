"""Generate OpenAPI documents from model types."""

from oasgen.api.base import Api, Example, Path, Request, Response, Tag
from oasgen.exporter.assemble import assemble
from oasgen.schema.fields import Meta
from oasgen.schema.params import extract_parameters, extract_response_headers
from oasgen.schema.synth import synthesize

__all__ = [
    "Api",
    "Example",
    "Meta",
    "Path",
    "Request",
    "Response",
    "Tag",
    "assemble",
    "extract_parameters",
    "extract_response_headers",
    "synthesize",
]
