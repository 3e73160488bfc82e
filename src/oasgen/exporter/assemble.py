"""Assemble an OpenAPI document from registered endpoints."""

import logging
from typing import Iterable

import structlog

from oasgen.api.base import Example as ApiExample, Path, Request, Response
from oasgen.config import Settings, get_settings
from oasgen.exporter.document import (
    Document,
    Example,
    Info,
    MediaType,
    Operation,
    RequestBody,
    ResponseObject,
    TagObject,
)
from oasgen.schema.fields import is_aggregate
from oasgen.schema.model import Kind, Schema
from oasgen.schema.params import extract_parameters, extract_response_headers
from oasgen.schema.synth import describe, synthesize, unwrap

logger = structlog.wrap_logger(logging.getLogger(__name__))


def _examples(examples: list[ApiExample], settings: Settings) -> dict[str, Example] | None:
    if not examples:
        return None
    return {
        settings.example_name(n): Example(summary=ex.summary, description=ex.description, value=ex.value)
        for n, ex in enumerate(examples, start=1)
    }


def _content(
    schema: Schema,
    content_types: list[str],
    examples: list[ApiExample],
    settings: Settings,
) -> dict[str, MediaType]:
    """Replicate one schema and example set under every content type."""
    content_types = content_types or [settings.default_content_type]
    return {
        ct: MediaType(schema_=schema, examples=_examples(examples, settings))
        for ct in content_types
    }


def _request_body(method: str, request: Request, settings: Settings) -> RequestBody | None:
    if method.lower() == "get":
        return None

    syn = synthesize(request.model, settings)
    if not syn.present:
        return None
    if syn.kind is Kind.AGGREGATE and not syn.schema.properties:
        return None

    return RequestBody(
        description=request.description,
        required=request.required or None,
        content=_content(syn.schema, request.content_type, request.examples, settings),
    )


def _is_model(value) -> bool:
    return is_aggregate(unwrap(describe(value)))


def _response(response: Response, settings: Settings) -> ResponseObject:
    result = ResponseObject(description=response.description)

    syn = synthesize(response.model, settings)
    if syn.present:
        result.content = _content(syn.schema, response.content_type, response.examples, settings)
    if _is_model(response.model):
        result.headers = extract_response_headers(response.model, settings) or None

    return result


def _operation(path: Path, settings: Settings) -> Operation:
    operation = Operation(
        summary=path.summary,
        description=path.description,
        # only model-typed request bodies carry bound fields
        parameters=extract_parameters(path.request.model, settings) if _is_model(path.request.model) else [],
        request_body=_request_body(path.method, path.request, settings),
        tags=[tag.name for tag in path.tags],
    )
    for response in path.responses:
        # keyed by status code; a later response with the same code replaces an earlier one
        operation.responses[response.code] = _response(response, settings)
    return operation


def assemble(
    title: str,
    description: str,
    version: str,
    endpoints: Iterable[Path],
    settings: Settings | None = None,
) -> Document:
    """Build the document for *endpoints*.

    Operations are grouped by exact URL and lower-cased method; a repeated
    method on the same URL replaces the earlier operation. Tags are listed
    once each, in order of first use, with the first description seen.
    """
    settings = settings or get_settings()

    paths: dict[str, dict[str, Operation]] = {}
    tags: dict[str, TagObject] = {}

    for endpoint in endpoints:
        method = endpoint.method.lower()
        logger.debug("assemble_endpoint", method=method, url=endpoint.url)

        paths.setdefault(endpoint.url, {})[method] = _operation(endpoint, settings)

        for tag in endpoint.tags:
            if tag.name not in tags:
                tags[tag.name] = TagObject(name=tag.name, description=tag.description)

    logger.info("assembled_document", title=title, paths=len(paths), tags=len(tags))

    return Document(
        openapi=settings.openapi_version,
        info=Info(title=title, description=description, version=version),
        paths=paths,
        tags=list(tags.values()),
    )
