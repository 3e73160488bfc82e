"""Extraction of query/header/cookie parameters and response headers.

Fields bound to a location are left out of body schemas by the
synthesizer and surface here instead.
"""

from typing import Any

from oasgen.config import Settings, get_settings
from oasgen.errors import NotAnAggregateError, UnsupportedTypeError
from oasgen.exporter.document import Header, MediaType, Parameter
from oasgen.schema.fields import FieldSpec, LOCATIONS, is_aggregate, model_fields
from oasgen.schema.model import Kind, Schema
from oasgen.schema.synth import describe, unwrap, synthesize

_STRUCTURED = (Kind.AGGREGATE, Kind.MAPPING)


def _model_type(value: Any) -> type | None:
    tp = unwrap(describe(value))
    if tp is None or tp is type(None):
        return None
    if not is_aggregate(tp):
        raise NotAnAggregateError(tp)
    return tp


def _walk(tp: type, settings: Settings) -> list[FieldSpec]:
    """Fields of *tp*, with embedded models expanded in place."""
    specs = []
    for spec in model_fields(tp, settings):
        inner = unwrap(spec.annotation)
        if spec.embed and not spec.is_bound and is_aggregate(inner):
            specs.extend(_walk(inner, settings))
        else:
            specs.append(spec)
    return specs


def extract_parameters(value: Any, settings: Settings | None = None) -> list[Parameter]:
    """Build one Parameter per populated binding location of each field.

    ``None`` yields no parameters. Anything other than a model class or
    instance raises :class:`NotAnAggregateError`.
    """
    settings = settings or get_settings()
    tp = _model_type(value)
    if tp is None:
        return []

    params = []
    for spec in _walk(tp, settings):
        if not spec.is_bound:
            continue
        syn = synthesize(spec.annotation, settings)
        for location in LOCATIONS:
            name = spec.bindings.get(location)
            if name is None:
                continue
            param = Parameter(name=name, in_=location, description=spec.description)
            if not syn.present:
                param.content = {settings.default_content_type: MediaType(schema_=Schema.open_object())}
            elif syn.kind in _STRUCTURED:
                # structured values travel encoded in a single parameter
                param.content = {settings.default_content_type: MediaType(schema_=syn.schema)}
            else:
                param.schema_ = syn.schema
            params.append(param)
    return params


def extract_response_headers(value: Any, settings: Settings | None = None) -> dict[str, Header]:
    """Collect the header-bound fields of a response model.

    Header values must be scalars; any other shape raises
    :class:`UnsupportedTypeError`.
    """
    settings = settings or get_settings()
    tp = _model_type(value)
    if tp is None:
        raise NotAnAggregateError(value)

    headers = {}
    for spec in _walk(tp, settings):
        name = spec.bindings.get("header")
        if not name:
            continue
        syn = synthesize(spec.annotation, settings)
        if syn.kind is not Kind.SCALAR:
            raise UnsupportedTypeError(spec.annotation, f"header {name!r} must be a scalar")
        headers[name] = Header(description=spec.description, schema_=Schema.primitive(syn.schema.type))
    return headers
