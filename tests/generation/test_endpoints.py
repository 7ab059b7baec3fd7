from __future__ import annotations

from pathlib import Path

import pytest

from ramlify.errors import UnsupportedConstructError
from ramlify.generation.emitter import render_file
from ramlify.generation.endpoints import generate_endpoints, go_string, is_json_content_type, path_arg_name
from ramlify.generation.models import generate_models
from ramlify.generation.profile import GenerationProfile
from ramlify.generation.source import Module
from ramlify.model import ApiModel, build_model


def _generate(api: ApiModel, tmp_path: Path, profile: GenerationProfile | None = None) -> tuple[Module, str]:
    module = Module(tmp_path, "client")
    generate_models(api, module.file("models.go"))
    source_file = module.file("endpoints.go")
    generate_endpoints(api, source_file, profile or GenerationProfile())
    return module, render_file(source_file, "client")


class TestEndpointGenerator:
    def test_default_base_url(self, sample_api: ApiModel, tmp_path: Path) -> None:
        _, output = _generate(sample_api, tmp_path)
        assert 'func defaultBaseURL() string {\n\treturn "https://api.example.com/v1"\n}' in output

    def test_one_method_per_operation(self, sample_api: ApiModel, tmp_path: Path) -> None:
        module, _ = _generate(sample_api, tmp_path)
        funcs = module.file("endpoints.go").funcs
        assert list(funcs) == ["defaultBaseURL", "ListUsers", "CreateUser", "GetUser", "DeleteUsers"]
        assert all(func.receiver == "c *Client" for name, func in funcs.items() if name != "defaultBaseURL")

    def test_no_path_parameters_means_no_path_args(self, sample_api: ApiModel, tmp_path: Path) -> None:
        module, _ = _generate(sample_api, tmp_path)
        create = module.file("endpoints.go").funcs["CreateUser"]
        assert [str(arg) for arg in create.args] == ["payload User"]

    def test_path_parameters_are_formatted(self, sample_api: ApiModel, tmp_path: Path) -> None:
        module, output = _generate(sample_api, tmp_path)
        get_user = module.file("endpoints.go").funcs["GetUser"]
        assert [str(arg) for arg in get_user.args] == ["userID string"]
        assert 'c.url(fmt.Sprintf("/users/%s", userID) + q)' in output

    def test_numeric_path_parameter(self, tmp_path: Path) -> None:
        api = build_model(
            {"title": "t", "/orders/{orderId}": {"uriParameters": {"orderId": "integer"}, "get": {}}}
        )
        module, output = _generate(api, tmp_path)
        assert [str(arg) for arg in module.file("endpoints.go").funcs["GetOrders"].args] == ["orderID int"]
        assert 'fmt.Sprintf("/orders/%d", orderID)' in output

    def test_no_query_parameters_uses_empty_query(self, sample_api: ApiModel, tmp_path: Path) -> None:
        module, _ = _generate(sample_api, tmp_path)
        source_file = module.file("endpoints.go")
        assert '\tq := ""\n' in "".join(source_file.funcs["GetUser"].body)
        assert not source_file.has_struct("GetUserParams")

    def test_query_parameters_struct(self, sample_api: ApiModel, tmp_path: Path) -> None:
        module, output = _generate(sample_api, tmp_path)
        source_file = module.file("endpoints.go")
        params = source_file.struct("ListUsersParams")
        assert [(field.name, field.type, field.tag) for field in params.fields] == [("Page", "*int", None)]
        assert "func (c *Client) ListUsers(query ListUsersParams) (*http.Response, []User, error) {" in output
        assert '\tif query.Page != nil {\n\t\tv.Set("page", fmt.Sprint(*query.Page))\n\t}\n' in output
        assert '\tq := "?" + v.Encode()\n' in output
        assert {"fmt", "net/url", "net/http"} <= source_file.imports

    def test_array_query_parameter(self, tmp_path: Path) -> None:
        api = build_model({"title": "t", "/search": {"get": {"queryParameters": {"tags": "string[]"}}}})
        _, output = _generate(api, tmp_path)
        assert '\tfor _, item := range query.Tags {\n\t\tv.Add("tags", fmt.Sprint(item))\n\t}\n' in output

    def test_bodiless_success_returns_response_and_error(self, sample_api: ApiModel, tmp_path: Path) -> None:
        module, output = _generate(sample_api, tmp_path)
        delete = module.file("endpoints.go").funcs["DeleteUsers"]
        assert delete.return_types == ["*http.Response", "error"]
        body = "".join(delete.body)
        assert "return res, &StatusError{Response: res}" in body
        assert "return res, nil" in body
        assert "Decode" not in body

    def test_success_body_is_decoded(self, sample_api: ApiModel, tmp_path: Path) -> None:
        module, _ = _generate(sample_api, tmp_path)
        get_user = module.file("endpoints.go").funcs["GetUser"]
        assert get_user.return_types == ["*http.Response", "User", "error"]
        body = "".join(get_user.body)
        assert "\tvar typ User\n" in body
        assert body.index("res.StatusCode >= 300") < body.index("Decode(&typ)")

    def test_no_success_response_returns_transport_result(self, tmp_path: Path) -> None:
        api = build_model({"title": "t", "/jobs": {"post": {"responses": {500: {}}}}})
        module, _ = _generate(api, tmp_path)
        create = module.file("endpoints.go").funcs["CreateJobs"]
        assert create.return_types == ["*http.Response", "error"]
        assert "".join(create.body).endswith("\treturn c.do(req)\n")

    def test_request_body_is_marshaled(self, sample_api: ApiModel, tmp_path: Path) -> None:
        module, output = _generate(sample_api, tmp_path)
        body = "".join(module.file("endpoints.go").funcs["CreateUser"].body)
        assert "\tbody, err := json.Marshal(payload)\n" in body
        assert 'http.NewRequest("POST", c.url("/users" + q), bytes.NewReader(body))' in body
        assert '\treq.Header.Set("Content-Type", "application/json")\n' in body
        assert '\t"bytes"' in output

    def test_inline_body_declares_payload_struct(self, tmp_path: Path) -> None:
        api = build_model(
            {
                "title": "t",
                "/sessions": {
                    "post": {"body": {"application/json": {"properties": {"user_name": "string", "token?": "string"}}}}
                },
            }
        )
        module, _ = _generate(api, tmp_path)
        source_file = module.file("endpoints.go")
        payload = source_file.struct("CreateSessionsPayload")
        assert [(field.name, field.type) for field in payload.fields] == [("UserName", "string"), ("Token", "*string")]
        assert [str(arg) for arg in source_file.funcs["CreateSessions"].args] == ["payload CreateSessionsPayload"]

    def test_vendor_json_content_type_is_supported(self, tmp_path: Path) -> None:
        api = build_model({"title": "t", "/events": {"post": {"body": {"application/vnd.api+json": {"type": "object"}}}}})
        module, _ = _generate(api, tmp_path)
        assert module.file("endpoints.go").has_struct("CreateEventsPayload")

    def test_multipart_body_is_unsupported(self, tmp_path: Path) -> None:
        api = build_model({"title": "t", "/uploads": {"post": {"body": {"multipart/form-data": {"type": "file"}}}}})
        with pytest.raises(UnsupportedConstructError, match="multipart/form-data"):
            _generate(api, tmp_path)

    def test_duplicate_operation_name_is_unsupported(self, tmp_path: Path) -> None:
        api = build_model(
            {
                "title": "t",
                "/a": {"get": {"displayName": "fetch"}},
                "/b": {"get": {"displayName": "fetch"}},
            }
        )
        with pytest.raises(UnsupportedConstructError, match="Fetch"):
            _generate(api, tmp_path)

    def test_array_alias_response(self, tmp_path: Path) -> None:
        api = build_model(
            {
                "title": "t",
                "types": {"User": {"properties": {"id": "string"}}, "Users": "User[]"},
                "/users": {"get": {"responses": {200: {"body": {"application/json": {"type": "Users"}}}}}},
            }
        )
        module, output = _generate(api, tmp_path)
        assert module.file("models.go").typedefs["Users"].type == "[]User"
        assert "func (c *Client) GetUsers() (*http.Response, Users, error) {" in output

    def test_alias_payload_is_used_directly(self, tmp_path: Path) -> None:
        api = build_model(
            {
                "title": "t",
                "types": {"Tag": {"properties": {"label": "string"}}, "Tags": "Tag[]"},
                "/tags": {"put": {"body": {"application/json": {"type": "Tags"}}}},
            }
        )
        module, _ = _generate(api, tmp_path)
        source_file = module.file("endpoints.go")
        assert [str(arg) for arg in source_file.funcs["UpdateTags"].args] == ["payload Tags"]
        assert not source_file.has_struct("UpdateTagsPayload")

    def test_path_parameter_named_query(self, tmp_path: Path) -> None:
        api = build_model(
            {"title": "t", "/search/{query}": {"get": {"queryParameters": {"page?": "integer"}}}}
        )
        module, output = _generate(api, tmp_path)
        search = module.file("endpoints.go").funcs["GetSearch"]
        assert [str(arg) for arg in search.args] == ["queryParam string", "query GetSearchParams"]
        assert 'fmt.Sprintf("/search/%s", queryParam)' in output

    def test_path_parameter_named_like_a_local(self, tmp_path: Path) -> None:
        api = build_model({"title": "t", "/items/{v}": {"get": {"queryParameters": {"q": "string"}}}})
        module, output = _generate(api, tmp_path)
        get_items = module.file("endpoints.go").funcs["GetItems"]
        assert get_items.args[0].name == "vParam"
        assert 'fmt.Sprintf("/items/%s", vParam)' in output
        assert "\tv := url.Values{}\n" in output

    def test_prefix_depth(self, tmp_path: Path) -> None:
        api = build_model({"title": "t", "/api/status": {"get": {}}})
        module, _ = _generate(api, tmp_path, GenerationProfile(prefix_depth=1))
        assert "GetStatus" in module.file("endpoints.go").funcs


class TestHelpers:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("userId", "userID"),
            ("query", "queryParam"),
            ("url", "urlParam"),
            ("err", "errParam"),
            ("type", "kind"),
        ],
    )
    def test_path_arg_name(self, name: str, expected: str) -> None:
        assert path_arg_name(name) == expected

    def test_go_string_escapes(self) -> None:
        assert go_string('say "hi"\n') == '"say \\"hi\\"\\n"'

    @pytest.mark.parametrize(
        "content_type, expected",
        [
            ("application/json", True),
            ("application/json; charset=utf-8", True),
            ("application/hal+json", True),
            ("multipart/form-data", False),
            ("text/plain", False),
        ],
    )
    def test_is_json_content_type(self, content_type: str, expected: bool) -> None:
        assert is_json_content_type(content_type) is expected
