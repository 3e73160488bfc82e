"""Type-to-schema synthesis.

``synthesize`` walks the shape of a type (or of an instance's type) and
returns a :class:`Synthesis`. Only the shape is inspected; runtime data
is never read, except that ``list`` and ``dict`` instances lend their
first element as the element sample.
"""

import collections
import collections.abc
import logging
import types
import typing
from typing import Any, TypeVar, Union, get_args, get_origin

import structlog

from oasgen.config import Settings, get_settings
from oasgen.errors import UnsupportedTypeError
from oasgen.schema.fields import is_aggregate, model_fields, split_annotated
from oasgen.schema.model import Kind, Schema, Synthesis

logger = structlog.wrap_logger(logging.getLogger(__name__))

OAS_TYPES: dict[type, str] = {
    bool: "boolean",
    str: "string",
    int: "integer",
    float: "number",
    complex: "number",
}

SEQUENCE_ORIGINS = (
    list,
    set,
    frozenset,
    collections.deque,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
)

MAPPING_ORIGINS = (
    dict,
    collections.OrderedDict,
    collections.defaultdict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
)

_UNION_ORIGINS = (Union, types.UnionType)


def describe(value: Any) -> Any:
    """Turn a sample value into the type annotation that describes it."""
    if value is None:
        return None
    if isinstance(value, type) or get_origin(value) is not None:
        return value
    if isinstance(value, (TypeVar, typing.ForwardRef)) or value is Any:
        return value
    if isinstance(value, list):
        return list[describe(value[0])] if value else list
    if isinstance(value, dict):
        return dict[str, describe(next(iter(value.values())))] if value else dict
    return type(value)


def _is_absent(tp: Any) -> bool:
    return tp is None or tp is type(None) or tp is Any or tp is object or isinstance(tp, TypeVar)


def unwrap(tp: Any) -> Any:
    """Strip ``Annotated`` and ``Optional`` layers.

    A union of several concrete types has no single shape and is reported
    as absent, like ``Any``.
    """
    while True:
        tp, _ = split_annotated(tp)
        if get_origin(tp) not in _UNION_ORIGINS:
            return tp
        members = [arg for arg in get_args(tp) if arg is not type(None)]
        if len(members) != 1:
            return None
        tp = members[0]


def synthesize(value: Any, settings: Settings | None = None) -> Synthesis:
    """Describe the shape of *value* as a schema node.

    Returns ``Synthesis.absent()`` when *value* carries no type
    information. Raises :class:`UnsupportedTypeError` for shapes that
    have no schema representation.
    """
    settings = settings or get_settings()
    tp = unwrap(describe(value))

    if _is_absent(tp):
        return Synthesis.absent()

    hook = getattr(tp, "__oas_schema__", None)
    if hook is not None:
        return _from_hook(hook())

    origin = get_origin(tp) or tp

    if origin is tuple:
        return _synth_tuple(tp, settings)
    if origin in SEQUENCE_ORIGINS:
        return _synth_sequence(tp, settings)
    if origin in MAPPING_ORIGINS:
        return _synth_mapping(tp, settings)

    if is_aggregate(tp):
        return _synth_aggregate(tp, settings)

    if isinstance(tp, type):
        return Synthesis(primitive_schema(tp), Kind.SCALAR)

    raise UnsupportedTypeError(tp)


def primitive_type(tp: type) -> str:
    """Look up the schema type name of a scalar type along its MRO."""
    for base in tp.__mro__:
        if base in OAS_TYPES:
            return OAS_TYPES[base]
    raise UnsupportedTypeError(tp, "unknown kind")


def primitive_schema(tp: type) -> Schema:
    return Schema.primitive(primitive_type(tp))


def _from_hook(schema: Schema) -> Synthesis:
    if schema.type == "array":
        kind = Kind.SEQUENCE
    elif schema.type == "object":
        kind = Kind.AGGREGATE if schema.properties is not None else Kind.MAPPING
    else:
        kind = Kind.SCALAR
    return Synthesis(schema, kind)


def _element(tp: Any, settings: Settings) -> Schema:
    syn = synthesize(tp, settings)
    return syn.schema if syn.present else Schema.open_object()


def _synth_sequence(tp: Any, settings: Settings) -> Synthesis:
    args = get_args(tp)
    element = args[0] if args else None
    return Synthesis(Schema.array(_element(element, settings)), Kind.SEQUENCE)


def _synth_tuple(tp: Any, settings: Settings) -> Synthesis:
    args = get_args(tp)
    if not args:
        element = None
    elif len(args) == 2 and args[1] is Ellipsis:
        element = args[0]
    elif all(arg == args[0] for arg in args):
        element = args[0]
    else:
        raise UnsupportedTypeError(tp, "heterogeneous tuple")
    return Synthesis(Schema.array(_element(element, settings)), Kind.SEQUENCE)


def _synth_mapping(tp: Any, settings: Settings) -> Synthesis:
    args = get_args(tp)
    value_type = args[1] if len(args) == 2 else None
    syn = synthesize(value_type, settings)
    additional = syn.schema if syn.present else True
    return Synthesis(Schema.object(additional_properties=additional), Kind.MAPPING)


def _synth_aggregate(tp: type, settings: Settings) -> Synthesis:
    logger.debug("synthesize_model", model=tp.__name__)

    properties: dict[str, Schema] = {}
    for spec in model_fields(tp, settings):
        if spec.is_bound:
            continue

        syn = synthesize(spec.annotation, settings)

        if spec.embed and syn.kind is Kind.AGGREGATE:
            properties.update(syn.schema.properties or {})
            continue

        schema = syn.schema if syn.present else Schema.open_object()
        if spec.description:
            schema = schema.with_description(spec.description)
        properties[spec.name] = schema

    return Synthesis(
        Schema.object(properties=properties, description=f"{tp.__name__} object"),
        Kind.AGGREGATE,
    )
