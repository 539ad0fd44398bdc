from api_documentor.analyzer.base import Endpoint, Parameter, ResponseSpec
from api_documentor.tester.schema import validate_params, validate_response

USER_SCHEMA = {
    "type": "object",
    "required": ["id", "name"],
    "properties": {"id": {"type": "integer"}, "name": {"type": "string"}},
}


def _endpoint(schema=None, parameters=()) -> Endpoint:
    return Endpoint(
        path="/users/:id",
        method="GET",
        parameters=list(parameters),
        responses=[ResponseSpec(status_code=200, schema_=schema), ResponseSpec(status_code=404)],
    )


class TestValidateResponse:
    def test_valid_body(self):
        result = validate_response(_endpoint(USER_SCHEMA), 200, {"id": 1, "name": "Ada"})
        assert result.valid is True
        assert result.errors == []

    def test_reports_every_violation(self):
        result = validate_response(_endpoint(USER_SCHEMA), 200, {"id": "x"})
        assert result.valid is False
        assert len(result.errors) == 2
        by_keyword = {e.keyword: e for e in result.errors}
        assert "'name' is a required property" in by_keyword["required"].message
        assert by_keyword["required"].path == ""
        assert by_keyword["type"].path == "/id"

    def test_nested_array_paths(self):
        schema = {"type": "array", "items": USER_SCHEMA}
        result = validate_response(_endpoint(schema), 200, [{"id": 1, "name": "a"}, {"id": 2, "name": 3}])
        assert [e.path for e in result.errors] == ["/1/name"]

    def test_pointer_escapes_tilde_and_slash(self):
        schema = {"type": "object", "properties": {"a/b": {"type": "integer"}, "c~d": {"type": "integer"}}}
        result = validate_response(_endpoint(schema), 200, {"a/b": "x", "c~d": "y"})
        assert sorted(e.path for e in result.errors) == ["/a~1b", "/c~0d"]

    def test_no_schema_passes(self):
        assert validate_response(_endpoint(None), 200, {"anything": True}).valid is True

    def test_undeclared_status_passes(self):
        assert validate_response(_endpoint(USER_SCHEMA), 500, "oops").valid is True

    def test_malformed_schema_is_single_violation(self):
        result = validate_response(_endpoint({"type": "no-such-type"}), 200, {})
        assert result.valid is False
        assert len(result.errors) == 1

    def test_unresolvable_ref_is_single_violation(self):
        result = validate_response(_endpoint({"$ref": "#/definitions/Missing"}), 200, {})
        assert result.valid is False
        assert len(result.errors) == 1


class TestValidateParams:
    def test_missing_required(self):
        ep = _endpoint(
            parameters=[
                Parameter(name="id", location="path", required=True),
                Parameter(name="token", location="header", required=True),
                Parameter(name="age", location="query", type="integer"),
            ]
        )
        result = validate_params(ep, {"age": "not-a-number"})
        assert result.valid is False
        assert [e.message for e in result.errors] == [
            "Missing required parameter: id",
            "Missing required parameter: token",
        ]

    def test_type_mismatches(self):
        ep = _endpoint(
            parameters=[
                Parameter(name="id", location="path", required=True, type="integer"),
                Parameter(name="flag", location="query", type="boolean"),
                Parameter(name="tags", location="query", type="array"),
            ]
        )
        result = validate_params(ep, {"id": "7", "flag": "yes", "tags": ["a"]})
        assert [e.message for e in result.errors] == [
            "Parameter id should be a number, got string",
            "Parameter flag should be a boolean, got string",
        ]

    def test_bool_is_not_a_number(self):
        ep = _endpoint(parameters=[Parameter(name="n", location="query", type="number")])
        assert validate_params(ep, {"n": True}).errors[0].message == "Parameter n should be a number, got boolean"

    def test_null_and_list_are_not_objects(self):
        ep = _endpoint(
            parameters=[Parameter(name="a", location="body", type="object"), Parameter(name="b", location="body", type="object")]
        )
        result = validate_params(ep, {"a": None, "b": []})
        assert [e.message for e in result.errors] == [
            "Parameter a should be an object, got null",
            "Parameter b should be an object, got array",
        ]

    def test_valid(self):
        ep = _endpoint(parameters=[Parameter(name="id", location="path", required=True, type="integer")])
        assert validate_params(ep, {"id": 3}).valid is True
