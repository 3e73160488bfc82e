"""Per-field metadata for model types.

Fields of a pydantic model or a dataclass carry four concerns: the name
they serialize under, a description, an optional binding to a query,
header or cookie parameter, and whether they are embedded (flattened
into the parent). They are declared with ``Annotated[T, Meta(...)]`` or
through the field's metadata mapping under the configured key names::

    class ListUsers(BaseModel):
        filter: Annotated[str, Meta(query="filter", description="Name filter")] = ""
        page: int = Field(0, json_schema_extra={"query": "page"})
"""

import dataclasses
import re
import types
import typing
from dataclasses import dataclass, field
from typing import Annotated, Any, Mapping, Union, get_args, get_origin

from pydantic import BaseModel

from oasgen.config import Settings

LOCATIONS = ("query", "header", "cookie")

# binding values that mean "not bound here"
_UNBOUND = ("", "-")

_FIRST_CAP = re.compile(r"(.)([A-Z][a-z]+)")
_ALL_CAP = re.compile(r"([a-z0-9])([A-Z])")


def to_snake_case(name: str) -> str:
    snake = _FIRST_CAP.sub(r"\1_\2", name)
    snake = _ALL_CAP.sub(r"\1_\2", snake)
    return snake.lower()


@dataclass(frozen=True)
class Meta:
    """Metadata attached to one model field."""

    name: str | None = None
    description: str | None = None
    query: str | None = None
    header: str | None = None
    cookie: str | None = None
    embed: bool = False


@dataclass
class FieldSpec:
    """Resolved view of one model field."""

    attr: str
    annotation: Any
    name: str
    description: str = ""
    bindings: dict[str, str] = field(default_factory=dict)
    embed: bool = False

    @property
    def is_bound(self) -> bool:
        return bool(self.bindings)


def _is_class(tp: Any) -> bool:
    # list[int] passes isinstance(..., type) on some interpreters
    return isinstance(tp, type) and get_origin(tp) is None


def is_pydantic_model(tp: Any) -> bool:
    return _is_class(tp) and issubclass(tp, BaseModel)


def is_aggregate(tp: Any) -> bool:
    """True for pydantic model classes and dataclass classes."""
    return is_pydantic_model(tp) or (_is_class(tp) and dataclasses.is_dataclass(tp))


def split_annotated(annotation: Any) -> tuple[Any, list[Any]]:
    """Strip ``Annotated`` layers, returning the bare type and the extras."""
    extras: list[Any] = []
    while get_origin(annotation) is Annotated:
        args = get_args(annotation)
        annotation = args[0]
        extras.extend(args[1:])
    return annotation, extras


def field_extras(annotation: Any) -> list[Any]:
    """Annotated extras of a field type, including those under ``Optional``."""
    extras: list[Any] = []
    while True:
        annotation, found = split_annotated(annotation)
        extras.extend(found)
        if get_origin(annotation) not in (Union, types.UnionType):
            return extras
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) != 1:
            return extras
        annotation = members[0]


def _find_meta(extras: list[Any]) -> Meta | None:
    for extra in extras:
        if isinstance(extra, Meta):
            return extra
    return None


def _keyed(extra: Mapping[str, Any] | None, key: str) -> Any:
    if not extra:
        return None
    return extra.get(key)


def _bound(value: Any) -> str | None:
    if value is None:
        return None
    value = str(value)
    return None if value in _UNBOUND else value


def _resolve(
    attr: str,
    annotation: Any,
    extras: list[Any],
    keyed: Mapping[str, Any] | None,
    settings: Settings,
    alias: str | None = None,
    description: str | None = None,
) -> FieldSpec:
    meta = _find_meta(extras) or Meta()

    name = meta.name or _keyed(keyed, settings.name_key) or alias or attr
    if settings.snake_case_names:
        name = to_snake_case(name)

    desc = meta.description or _keyed(keyed, settings.description_key) or description or ""

    bindings: dict[str, str] = {}
    for location in LOCATIONS:
        key = getattr(settings, f"{location}_key")
        value = _bound(getattr(meta, location)) or _bound(_keyed(keyed, key))
        if value:
            bindings[location] = value

    embed = meta.embed or bool(_keyed(keyed, settings.embed_key))

    return FieldSpec(
        attr=attr,
        annotation=annotation,
        name=name,
        description=desc,
        bindings=bindings,
        embed=embed,
    )


def _pydantic_fields(model: type[BaseModel], settings: Settings) -> list[FieldSpec]:
    specs = []
    for attr, info in model.model_fields.items():
        annotation, _ = split_annotated(info.annotation)
        extras = list(info.metadata) + field_extras(info.annotation)
        keyed = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else None
        specs.append(
            _resolve(
                attr,
                annotation,
                extras,
                keyed,
                settings,
                alias=info.serialization_alias or info.alias,
                description=info.description,
            )
        )
    return specs


def _dataclass_fields(cls: type, settings: Settings) -> list[FieldSpec]:
    hints = typing.get_type_hints(cls, include_extras=True)
    specs = []
    for f in dataclasses.fields(cls):
        hint = hints.get(f.name, f.type)
        annotation, _ = split_annotated(hint)
        extras = field_extras(hint)
        specs.append(_resolve(f.name, annotation, extras, f.metadata, settings))
    return specs


def model_fields(tp: type, settings: Settings) -> list[FieldSpec]:
    """Return the fields of a model class in declaration order."""
    if is_pydantic_model(tp):
        return _pydantic_fields(tp, settings)
    if is_aggregate(tp):
        return _dataclass_fields(tp, settings)
    raise TypeError(f"{tp!r} is not a model class")
