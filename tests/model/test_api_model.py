from __future__ import annotations

import pytest

from ramlify.errors import ModelLoadError
from ramlify.model import ApiModel, TypeDescriptor, build_model, parse_type_expression


class TestParseTypeExpression:
    def test_plain_kind(self) -> None:
        assert parse_type_expression("string") == TypeDescriptor(kind="string")

    def test_nested_arrays(self) -> None:
        descriptor = parse_type_expression("integer[][]")
        assert descriptor.is_array
        assert descriptor.items is not None
        assert descriptor.items.is_array
        assert descriptor.items.items == TypeDescriptor(kind="integer")

    def test_nil_union_becomes_optional(self) -> None:
        assert parse_type_expression("string | nil") == TypeDescriptor(kind="string", required=False)

    def test_union_keeps_members(self) -> None:
        descriptor = parse_type_expression("Cat | Dog")
        assert descriptor.is_union
        assert descriptor.union_members == ("Cat", "Dog")

    def test_parenthesized_union_array(self) -> None:
        descriptor = parse_type_expression("(Cat | Dog)[]")
        assert descriptor.items is not None
        assert descriptor.items.union_members == ("Cat", "Dog")

    def test_inline_schema_is_any(self) -> None:
        assert parse_type_expression('{"type": "object"}').kind == "any"


class TestBuildModel:
    def test_types_and_properties(self, sample_api: ApiModel) -> None:
        user = sample_api.find_type("User")
        assert user is not None
        assert user.supertypes == ("Resource",)
        assert [prop.name for prop in user.properties] == ["name", "email", "age"]
        assert [prop.type.required for prop in user.properties] == [True, False, False]

    def test_explicit_required_flag(self) -> None:
        api = build_model(
            {
                "title": "t",
                "types": {"Item": {"properties": {"label": {"type": "string", "required": False}}}},
            }
        )
        item = api.find_type("Item")
        assert item is not None
        assert item.properties[0].type == TypeDescriptor(kind="string", required=False)

    def test_default_base_url_substitutes_version(self, sample_api: ApiModel) -> None:
        assert sample_api.default_base_url == "https://api.example.com/v1"

    def test_resources_nest_and_collect_uri_parameters(self, sample_api: ApiModel) -> None:
        paths = [resource.path for resource in sample_api.walk_resources()]
        assert paths == ["/users", "/users/{userId}"]
        child = sample_api.resources[0].resources[0]
        assert [param.name for param in child.uri_parameters] == ["userId"]

    def test_traits_contribute_query_parameters(self, sample_api: ApiModel) -> None:
        list_users = sample_api.resources[0].methods[0]
        assert list_users.query_parameters == []
        assert [param.name for param in list_users.all_query_parameters()] == ["page"]

    def test_resource_traits_apply_to_its_methods(self) -> None:
        api = build_model(
            {
                "title": "t",
                "traits": {"searchable": {"queryParameters": {"q": "string"}}},
                "/items": {"is": ["searchable"], "get": {}, "/{id}": {"get": {}}},
            }
        )
        parent, child = list(api.walk_resources())
        assert [param.name for param in parent.methods[0].all_query_parameters()] == ["q"]
        assert child.methods[0].all_query_parameters() == []

    def test_unknown_trait_raises(self) -> None:
        with pytest.raises(ModelLoadError, match="Unknown trait"):
            build_model({"title": "t", "/items": {"get": {"is": ["missing"]}}})

    def test_success_response_is_first_below_300(self) -> None:
        api = build_model(
            {
                "title": "t",
                "/items": {"get": {"responses": {404: {}, 201: {"body": {"type": "string"}}, 200: {}}}},
            }
        )
        response = api.resources[0].methods[0].success_response()
        assert response is not None
        assert response.code == "201"
        assert response.bodies[0].content_type == "application/json"

    def test_undeclared_uri_parameter_defaults_to_string(self) -> None:
        api = build_model({"title": "t", "/items/{itemId}": {"get": {}}})
        assert api.resources[0].uri_parameters[0].type == TypeDescriptor(kind="string")

    def test_invalid_section_shape_raises(self) -> None:
        with pytest.raises(ModelLoadError):
            build_model({"title": "t", "types": "nope"})
