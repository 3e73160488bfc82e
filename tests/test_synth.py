import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Callable, Optional

import pytest
from pydantic import BaseModel, Field

from oasgen.config import Settings
from oasgen.errors import UnsupportedTypeError
from oasgen.schema.fields import Meta, model_fields, to_snake_case
from oasgen.schema.model import Kind, Schema
from oasgen.schema.synth import OAS_TYPES, synthesize


class Color(str, Enum):
    RED = "red"
    BLUE = "blue"


class Address(BaseModel):
    street: str = ""
    zip_code: int = 0


class User(BaseModel):
    Name: str = ""
    Age: int = 0
    Filter: Annotated[str, Meta(query="filter")] = ""


class Profile(BaseModel):
    nickname: str = Field("", alias="nick", description="Display name")
    address: Address = Field(default_factory=Address)
    tags: list[str] = []
    scores: dict[str, float] = {}
    extra: Any = None
    choice: int | str = 0
    note: Optional[str] = None


class Audit(BaseModel):
    created_by: str = ""
    created_at: int = 0


class Document(BaseModel):
    audit: Annotated[Audit, Meta(embed=True)] = Field(default_factory=Audit)
    title: str = ""
    body: str = ""


class Overriding(BaseModel):
    audit: Annotated[Audit, Meta(embed=True)] = Field(default_factory=Audit)
    created_by: int = 0


class Bound(BaseModel):
    q: Annotated[str, Meta(query="q")] = ""
    token: Annotated[str, Meta(header="X-Token", cookie="token")] = ""
    session: Annotated[str, Meta(cookie="session")] = ""
    page: int = Field(0, json_schema_extra={"query": "page"})
    kept: Annotated[str, Meta(query="-")] = ""
    kept_too: Annotated[str, Meta(header="")] = ""
    body: str = ""


class OptionalBound(BaseModel):
    q: Optional[Annotated[str, Meta(query="q")]] = None
    token: Annotated[str, Meta(header="X-Token")] | None = None
    body: str = ""


@dataclass
class OptionalBoundRecord:
    body: str = ""
    q: Optional[Annotated[str, Meta(query="q")]] = None


class Described(BaseModel):
    owner: Annotated[Address, Meta(description="Where the owner lives")] = Field(default_factory=Address)
    plain: Address = Field(default_factory=Address)


class Money:
    @classmethod
    def __oas_schema__(cls):
        return Schema.primitive("string", "Decimal amount")


class Invoice(BaseModel):
    model_config = {"arbitrary_types_allowed": True}

    total: Money = None


@dataclass
class Point:
    x: float = 0.0
    y: Annotated[float, Meta(name="Y", description="Vertical position")] = 0.0
    label: str = dataclasses.field(default="", metadata={"name": "Label", "description": "Caption"})
    filter: str = dataclasses.field(default="", metadata={"query": "filter"})


class CamelModel(BaseModel):
    UserName: str = ""
    HTTPStatus: int = 0


class Opaque:
    pass


class WithCallback(BaseModel):
    callback: Callable[[int], int] = abs


class TestScalars:
    @pytest.mark.parametrize(
        "tp, expected",
        [
            (bool, "boolean"),
            (str, "string"),
            (int, "integer"),
            (float, "number"),
            (complex, "number"),
        ],
    )
    def test_scalar_table(self, tp, expected, settings):
        syn = synthesize(tp, settings)
        assert syn.kind is Kind.SCALAR
        assert syn.schema.type == expected
        assert OAS_TYPES[tp] == expected

    def test_bool_is_not_integer(self, settings):
        assert synthesize(True, settings).schema.type == "boolean"

    def test_instances_described_by_type(self, settings):
        assert synthesize(0, settings).schema.type == "integer"
        assert synthesize("", settings).schema.type == "string"
        assert synthesize(0.0, settings).schema.type == "number"

    def test_str_enum_resolves_through_mro(self, settings):
        assert synthesize(Color, settings).schema.type == "string"


class TestUnsupported:
    @pytest.mark.parametrize(
        "value",
        [
            bytes,
            Opaque,
            Callable[[int], int],
            tuple[int, str],
            type[int],
            len,
            lambda: None,
        ],
    )
    def test_fails_fatally(self, value, settings):
        with pytest.raises(UnsupportedTypeError):
            synthesize(value, settings)

    def test_error_carries_type(self, settings):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            synthesize(Opaque, settings)
        assert exc_info.value.type_ is Opaque

    def test_unsupported_field_aborts_model(self, settings):
        with pytest.raises(UnsupportedTypeError):
            synthesize(WithCallback, settings)


class TestAbsent:
    @pytest.mark.parametrize("value", [None, type(None), Any, object, int | str])
    def test_no_type_information(self, value, settings):
        syn = synthesize(value, settings)
        assert syn.present is False
        assert syn.schema is None

    def test_optional_unwraps(self, settings):
        assert synthesize(Optional[int], settings).schema.type == "integer"
        assert synthesize(int | None, settings).schema.type == "integer"

    def test_annotated_unwraps(self, settings):
        assert synthesize(Annotated[bool, "x"], settings).schema.type == "boolean"


class TestSequences:
    def test_list(self, settings):
        syn = synthesize(list[int], settings)
        assert syn.kind is Kind.SEQUENCE
        assert syn.schema.to_dict() == {"type": "array", "items": {"type": "integer"}}

    def test_list_of_models(self, settings):
        syn = synthesize(list[Address], settings)
        assert syn.schema.items.type == "object"
        assert set(syn.schema.items.properties) == {"street", "zip_code"}

    def test_set_and_homogeneous_tuple(self, settings):
        assert synthesize(set[str], settings).schema.items.type == "string"
        assert synthesize(tuple[float, ...], settings).schema.items.type == "number"
        assert synthesize(tuple[int, int], settings).schema.items.type == "integer"

    def test_untyped_list_items_are_open(self, settings):
        syn = synthesize(list, settings)
        assert syn.schema.items.to_dict() == {"type": "object", "additionalProperties": True}

    def test_list_instance_uses_first_element(self, settings):
        assert synthesize([1, 2], settings).schema.items.type == "integer"
        assert synthesize([], settings).schema.items.type == "object"


class TestMappings:
    def test_dict(self, settings):
        syn = synthesize(dict[str, int], settings)
        assert syn.kind is Kind.MAPPING
        assert syn.schema.to_dict() == {"type": "object", "additionalProperties": {"type": "integer"}}

    def test_dict_of_lists(self, settings):
        syn = synthesize(dict[str, list[str]], settings)
        assert syn.schema.additional_properties.type == "array"

    def test_untyped_dict(self, settings):
        syn = synthesize(dict, settings)
        assert syn.schema.properties is None
        assert syn.schema.additional_properties is True

    def test_dict_of_any(self, settings):
        assert synthesize(dict[str, Any], settings).schema.additional_properties is True


class TestAggregates:
    def test_property_count_and_names(self, settings):
        syn = synthesize(User, settings)
        assert syn.kind is Kind.AGGREGATE
        assert {k: v.to_dict() for k, v in syn.schema.properties.items()} == {
            "Name": {"type": "string"},
            "Age": {"type": "integer"},
        }

    def test_default_description(self, settings):
        assert synthesize(User, settings).schema.description == "User object"

    def test_instance_is_described_by_class(self, settings):
        assert synthesize(User(Name="x"), settings) == synthesize(User, settings)

    def test_alias_and_description(self, settings):
        props = synthesize(Profile, settings).schema.properties
        assert "nick" in props
        assert "nickname" not in props
        assert props["nick"].description == "Display name"

    def test_nested_model_keeps_type_description(self, settings):
        props = synthesize(Described, settings).schema.properties
        assert props["owner"].description == "Where the owner lives"
        assert props["plain"].description == "Address object"

    def test_absent_fields_become_open_objects(self, settings):
        props = synthesize(Profile, settings).schema.properties
        open_object = {"type": "object", "additionalProperties": True}
        assert props["extra"].to_dict() == open_object
        assert props["choice"].to_dict() == open_object

    def test_optional_field(self, settings):
        assert synthesize(Profile, settings).schema.properties["note"].type == "string"

    def test_nested_shapes(self, settings):
        props = synthesize(Profile, settings).schema.properties
        assert props["address"].type == "object"
        assert props["tags"].to_dict() == {"type": "array", "items": {"type": "string"}}
        assert props["scores"].additional_properties.type == "number"

    def test_empty_model(self, settings):
        class Empty(BaseModel):
            pass

        syn = synthesize(Empty, settings)
        assert syn.kind is Kind.AGGREGATE
        assert syn.schema.properties == {}

    def test_idempotent(self, settings):
        assert synthesize(Profile, settings) == synthesize(Profile, settings)


class TestEmbedding:
    def test_embedded_fields_are_flattened(self, settings):
        props = synthesize(Document, settings).schema.properties
        assert set(props) == {"created_by", "created_at", "title", "body"}
        assert "audit" not in props

    def test_later_outer_field_wins(self, settings):
        props = synthesize(Overriding, settings).schema.properties
        assert props["created_by"].type == "integer"


class TestBoundFields:
    def test_bound_fields_excluded_from_body(self, settings):
        props = synthesize(Bound, settings).schema.properties
        assert set(props) == {"kept", "kept_too", "body"}

    def test_binding_under_optional(self, settings):
        props = synthesize(OptionalBound, settings).schema.properties
        assert set(props) == {"body"}

    def test_binding_under_optional_dataclass(self, settings):
        props = synthesize(OptionalBoundRecord, settings).schema.properties
        assert set(props) == {"body"}
        specs = {spec.attr: spec for spec in model_fields(OptionalBoundRecord, settings)}
        assert specs["q"].bindings == {"query": "q"}

    def test_custom_annotation_keys(self):
        class Custom(BaseModel):
            page: int = Field(0, json_schema_extra={"oas-query": "page"})
            size: int = Field(0, json_schema_extra={"query": "size"})

        settings = Settings(query_key="oas-query")
        props = synthesize(Custom, settings).schema.properties
        assert set(props) == {"size"}


class TestDescribeHook:
    def test_hook_used_verbatim(self, settings):
        syn = synthesize(Money, settings)
        assert syn.kind is Kind.SCALAR
        assert syn.schema.to_dict() == {"type": "string", "description": "Decimal amount"}

    def test_hook_inside_model(self, settings):
        props = synthesize(Invoice, settings).schema.properties
        assert props["total"].type == "string"


class TestDataclasses:
    def test_dataclass_fields(self, settings):
        syn = synthesize(Point, settings)
        assert syn.schema.description == "Point object"
        props = syn.schema.properties
        assert set(props) == {"x", "Y", "Label"}
        assert props["Y"].description == "Vertical position"
        assert props["Label"].description == "Caption"

    def test_model_fields_bindings(self, settings):
        specs = {spec.attr: spec for spec in model_fields(Point, settings)}
        assert specs["filter"].bindings == {"query": "filter"}
        assert specs["filter"].is_bound
        assert not specs["x"].is_bound


class TestNaming:
    def test_snake_case(self):
        assert to_snake_case("UserName") == "user_name"
        assert to_snake_case("HTTPStatus") == "http_status"
        assert to_snake_case("id") == "id"

    def test_snake_case_setting(self):
        props = synthesize(CamelModel, Settings(snake_case_names=True)).schema.properties
        assert set(props) == {"user_name", "http_status"}

    def test_declared_names_by_default(self, settings):
        assert set(synthesize(CamelModel, settings).schema.properties) == {"UserName", "HTTPStatus"}
