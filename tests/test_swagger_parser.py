from pathlib import Path

import pytest

from api_markup.errors import ParseError
from api_markup.parser.swagger import parse_spec

FIXTURES = Path(__file__).parent / "fixtures"


class TestParseSource:
    def test_parse_from_path(self):
        spec = parse_spec(FIXTURES / "petstore.yaml")
        assert spec.info.title == "Swagger Petstore"

    def test_parse_from_string_matches_path(self):
        text = (FIXTURES / "petstore.yaml").read_text(encoding="utf-8")
        assert parse_spec(text) == parse_spec(FIXTURES / "petstore.yaml")

    def test_parse_json_bytes(self):
        spec = parse_spec((FIXTURES / "petstore_minimal.json").read_bytes())
        assert spec.info.title == "Minimal Petstore"
        assert list(spec.definitions) == ["Pet", "Owner"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ParseError) as exc:
            parse_spec(tmp_path / "nope.yaml")
        assert exc.value.stage == "parse"

    def test_invalid_yaml(self):
        with pytest.raises(ParseError):
            parse_spec("swagger: [unclosed")

    def test_non_mapping_root(self):
        with pytest.raises(ParseError, match="mapping"):
            parse_spec("- a\n- b\n")

    def test_openapi3_rejected(self):
        with pytest.raises(ParseError, match="Unsupported OpenAPI version"):
            parse_spec('{"openapi": "3.0.0", "info": {}, "paths": {}}')

    def test_missing_version(self):
        with pytest.raises(ParseError, match="swagger"):
            parse_spec("info:\n  title: x\n")


class TestMalformedInput:
    DOC = """
swagger: "2.0"
info:
  title: 2024
  version: 1.0
paths:
  /pets:
    get:
      summary:
      description:
      parameters:
        - in: query
          name: limit
          type: integer
          description:
      responses:
        "200":
          description:
"""

    def test_invalid_utf8_bytes(self):
        with pytest.raises(ParseError, match="UTF-8") as exc:
            parse_spec(b'swagger: "2.0"\ninfo:\n  title: \xff\xfe\n')
        assert exc.value.stage == "parse"

    def test_invalid_utf8_file(self, tmp_path):
        path = tmp_path / "swagger.yaml"
        path.write_bytes(b'swagger: "2.0"\ninfo:\n  title: \xff\xfe\n')
        with pytest.raises(ParseError, match="UTF-8") as exc:
            parse_spec(path)
        assert exc.value.entity == str(path)

    def test_empty_text_fields_read_as_empty(self):
        op = parse_spec(self.DOC).operations[0]
        assert op.summary == ""
        assert op.description == ""
        assert op.parameters[0].description == ""
        assert op.responses[0].description == ""

    def test_scalar_text_fields_read_as_strings(self):
        info = parse_spec(self.DOC).info
        assert info.title == "2024"
        assert info.version == "1.0"

    def test_structured_summary_names_operation(self):
        doc = self.DOC.replace("      summary:\n", "      summary: {text: x}\n")
        with pytest.raises(ParseError) as exc:
            parse_spec(doc)
        assert exc.value.entity == "GET /pets"
        assert exc.value.describe().startswith("[parse] GET /pets:")

    def test_structured_title_names_info(self):
        doc = self.DOC.replace("  title: 2024\n", "  title: [a, b]\n")
        with pytest.raises(ParseError) as exc:
            parse_spec(doc)
        assert exc.value.entity == "info"

    def test_wrongly_typed_tags_names_operation(self):
        doc = self.DOC.replace("      summary:\n", "      summary:\n      tags: [{name: pet}]\n")
        with pytest.raises(ParseError) as exc:
            parse_spec(doc)
        assert exc.value.entity == "GET /pets"


class TestPetstore:
    def test_operations_in_declaration_order(self):
        spec = parse_spec(FIXTURES / "petstore.yaml")
        assert [op.operation_id for op in spec.operations] == [
            "addPet", "updatePet", "findPetsByStatus", "getPetById", "deletePet",
            "placeOrder", "getOrderById", "createUser", "loginUser", "getUserByName",
        ]

    def test_overview_fields(self):
        spec = parse_spec(FIXTURES / "petstore.yaml")
        assert spec.schemes == ["http", "https"]
        assert spec.host == "petstore.swagger.io"
        assert spec.base_path == "/v2"
        assert spec.info.contact.email == "apiteam@swagger.io"
        assert spec.info.license.name == "Apache 2.0"
        assert [t.name for t in spec.tags] == ["pet", "store", "user"]

    def test_body_parameter_keeps_schema(self):
        spec = parse_spec(FIXTURES / "petstore.yaml")
        add_pet = spec.operations[0]
        body = add_pet.parameters[0]
        assert body.location == "body"
        assert body.required is True
        assert body.schema_ == {"$ref": "#/definitions/Pet"}

    def test_query_parameter_schema_from_type_keys(self):
        spec = parse_spec(FIXTURES / "petstore.yaml")
        find = [op for op in spec.operations if op.operation_id == "findPetsByStatus"][0]
        status = find.parameters[0]
        assert status.schema_["type"] == "array"
        assert status.schema_["collectionFormat"] == "multi"
        assert status.default == "available"

    def test_responses_keyed_by_string_status(self):
        spec = parse_spec(FIXTURES / "petstore.yaml")
        update = spec.operations[1]
        assert [r.status for r in update.responses] == ["400", "404"]

    def test_security_definitions(self):
        spec = parse_spec(FIXTURES / "petstore.yaml")
        oauth = spec.security_definitions["petstore_auth"]
        assert oauth.flow == "implicit"
        assert set(oauth.scopes) == {"write:pets", "read:pets"}
        assert spec.security_definitions["api_key"].location == "header"

    def test_operation_without_security_inherits(self):
        spec = parse_spec(FIXTURES / "petstore.yaml")
        place_order = [op for op in spec.operations if op.operation_id == "placeOrder"][0]
        assert place_order.security is None


class TestSharedComponents:
    DOC = """
swagger: "2.0"
info: {title: t, version: "1"}
parameters:
  limit:
    in: query
    name: limit
    type: integer
responses:
  NotFound:
    description: Not here
paths:
  /items/{id}:
    parameters:
      - {in: path, name: id, type: string, required: true}
      - {in: query, name: verbose, type: boolean}
    get:
      parameters:
        - $ref: "#/parameters/limit"
        - {in: query, name: verbose, type: string, description: overridden}
      responses:
        "404":
          $ref: "#/responses/NotFound"
"""

    def test_shared_parameters_and_responses_inlined(self):
        spec = parse_spec(self.DOC)
        op = spec.operations[0]
        assert [p.name for p in op.parameters] == ["id", "limit", "verbose"]
        assert op.parameters[2].description == "overridden"
        assert op.responses[0].description == "Not here"

    def test_path_parameters_required_by_default(self):
        spec = parse_spec(self.DOC)
        assert spec.operations[0].parameters[0].required is True

    def test_unknown_shared_parameter(self):
        doc = self.DOC.replace("#/parameters/limit", "#/parameters/missing")
        with pytest.raises(ParseError, match="Unknown parameter reference"):
            parse_spec(doc)
