import pytest
from pydantic import ValidationError

from api_markup.model.schema import Definition, Property, ResolvedOperation
from api_markup.parser.base import ApiOperation, Param


class TestParam:
    def test_create_required_param(self):
        p = Param(name="id", location="path", required=True)
        assert p.name == "id"
        assert p.required is True
        assert p.description == ""
        assert p.schema_ == {}

    def test_params_are_immutable(self):
        p = Param(name="id", location="path", required=True)
        with pytest.raises(ValidationError):
            p.name = "other"


class TestApiOperation:
    def test_create_minimal_operation(self):
        op = ApiOperation(method="GET", path="/api/users")
        assert op.tags == []
        assert op.security is None
        assert op.deprecated is False


class TestResolvedOperation:
    def test_key_and_title(self):
        op = ResolvedOperation(method="GET", path="/pets", name="listPets")
        assert op.key == ("/pets", "GET")
        assert op.title == "GET /pets"

    def test_summary_is_title(self):
        op = ResolvedOperation(method="GET", path="/pets", name="listPets", summary="List pets")
        assert op.title == "List pets"


class TestProperty:
    def test_nested_property(self):
        prop = Property(name="tags", kind="array", type="array",
                        items=Property(kind="ref", type="Tag", ref="Tag"))
        assert prop.items.ref == "Tag"

    def test_definition_serialization_roundtrip(self):
        definition = Definition(
            name="Pet",
            properties=[Property(name="name", required=True)],
            xml={"name": "Pet"},
        )
        again = Definition(**definition.model_dump())
        assert again == definition
