"""Schema nodes produced by the synthesizer."""

from enum import Enum
from typing import NamedTuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

PRIMITIVE_TYPES = ("boolean", "string", "integer", "number")


class Kind(str, Enum):
    """Structural kind of a synthesized value."""

    ABSENT = "absent"
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    AGGREGATE = "aggregate"
    MAPPING = "mapping"


class Schema(BaseModel):
    """One node of a schema tree: a primitive, an object or an array."""

    model_config = ConfigDict(populate_by_name=True)

    type: str
    description: str | None = None
    properties: dict[str, "Schema"] | None = None
    items: "Schema | None" = None
    additional_properties: Union[bool, "Schema", None] = Field(None, alias="additionalProperties")

    @model_validator(mode="after")
    def _check_shape(self) -> "Schema":
        if self.type == "array":
            if self.items is None:
                raise ValueError("array schema requires items")
            if self.properties is not None or self.additional_properties is not None:
                raise ValueError("array schema cannot carry properties")
        elif self.type == "object":
            if self.items is not None:
                raise ValueError("object schema cannot carry items")
        elif self.type in PRIMITIVE_TYPES:
            if self.properties is not None or self.items is not None or self.additional_properties is not None:
                raise ValueError(f"{self.type} schema cannot have children")
        else:
            raise ValueError(f"unknown schema type {self.type!r}")
        return self

    @classmethod
    def primitive(cls, type_name: str, description: str | None = None) -> "Schema":
        return cls(type=type_name, description=description)

    @classmethod
    def array(cls, items: "Schema", description: str | None = None) -> "Schema":
        return cls(type="array", items=items, description=description)

    @classmethod
    def object(
        cls,
        properties: dict[str, "Schema"] | None = None,
        additional_properties: "bool | Schema | None" = None,
        description: str | None = None,
    ) -> "Schema":
        return cls(
            type="object",
            properties=properties,
            additional_properties=additional_properties,
            description=description,
        )

    @classmethod
    def open_object(cls) -> "Schema":
        """Object accepting any keys; stands in where no type is known."""
        return cls(type="object", additional_properties=True)

    def with_description(self, description: str) -> "Schema":
        return self.model_copy(update={"description": description})

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class Synthesis(NamedTuple):
    """Result of synthesizing a value: either no schema, or a schema and its kind."""

    schema: Schema | None
    kind: Kind

    @property
    def present(self) -> bool:
        return self.kind is not Kind.ABSENT

    @classmethod
    def absent(cls) -> "Synthesis":
        return cls(None, Kind.ABSENT)


Schema.model_rebuild()
