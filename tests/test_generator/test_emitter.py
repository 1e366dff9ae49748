"""Tests for openapi2lua.generator.emitter -- Lua source text.

These tests check the emitted text.  Behaviour of the generated code when
executed by a Lua interpreter is covered in ``test_lua_runtime.py``.
"""

from __future__ import annotations

from typing import Any

import pytest

from openapi2lua.generator.emitter import build_url_expression, emit_client
from openapi2lua.generator.tree import build_tree
from openapi2lua.models import EmitOptions, PathTreeNode


def _emit(routes: dict[str, dict[str, Any]], **options: Any) -> str:
    return emit_client(build_tree(routes), EmitOptions(**options))


# ------------------------------------------------------------------ #
# build_url_expression
# ------------------------------------------------------------------ #


class TestBuildUrlExpression:
    @pytest.mark.parametrize(
        ("path", "params", "expected"),
        [
            ("/users", [], '"/users"'),
            ("/users/{id}/flags", ["id"], '"/users/" .. id .. "/flags"'),
            ("/users/{id}", ["id"], '"/users/" .. id'),
            ("/{id}", ["id"], '"/" .. id'),
            ("{id}", ["id"], "id"),
            ("/", [], '"/"'),
            ("", [], '""'),
            ("/a//b/", [], '"/a//b/"'),
            ("/a/{x}/{y}", ["x", "y"], '"/a/" .. x .. "/" .. y'),
        ],
    )
    def test_expressions(self, path: str, params: list[str], expected: str) -> None:
        assert build_url_expression(path, params) == expected

    def test_duplicate_names_bind_by_position(self) -> None:
        expr = build_url_expression("/orgs/{id}/members/{id}", ["id", "id_2"])
        assert expr == '"/orgs/" .. id .. "/members/" .. id_2'

    def test_partial_brace_segment_stays_literal(self) -> None:
        expr = build_url_expression("/files/{name}.{ext}", [])
        assert expr == '"/files/{name}.{ext}"'

    def test_literal_escaped(self) -> None:
        assert build_url_expression('/say"hi"', []) == '"/say\\"hi\\""'


# ------------------------------------------------------------------ #
# Module skeleton
# ------------------------------------------------------------------ #


class TestSkeleton:
    def test_default_client_name(self, example_tree: PathTreeNode) -> None:
        source = emit_client(example_tree)
        assert source.startswith("local Client = {}\nClient.__index = Client\n")
        assert source.rstrip().endswith("return Client")

    def test_custom_client_name_sanitized(self, example_tree: PathTreeNode) -> None:
        source = emit_client(example_tree, EmitOptions(client_name="pet-store"))
        assert "local pet_store = {}" in source
        assert "function pet_store:new(config)" in source
        assert "function pet_store:_request(options)" in source
        assert source.rstrip().endswith("return pet_store")

    @pytest.mark.parametrize("name", ["encodeQuery", "encodeComponent", "string", "pairs"])
    def test_name_shadowing_runtime_gets_suffix(
        self, example_tree: PathTreeNode, name: str
    ) -> None:
        source = emit_client(example_tree, EmitOptions(client_name=name))
        assert f"local {name}_ = {{}}" in source
        assert f"function {name}_:new(config)" in source
        assert source.rstrip().endswith(f"return {name}_")

    def test_empty_client_name_falls_back(self, example_tree: PathTreeNode) -> None:
        source = emit_client(example_tree, EmitOptions(client_name=""))
        assert "local Client = {}" in source

    def test_constructor_fields(self, example_tree: PathTreeNode) -> None:
        source = emit_client(example_tree)
        assert "    baseUrl = config.baseUrl," in source
        assert "    baseHeaders = config.baseHeaders or {}," in source
        assert "    request = config.request" in source
        assert "  setmetatable(instance, self)" in source

    def test_header_mutators(self, example_tree: PathTreeNode) -> None:
        source = emit_client(example_tree)
        assert "function Client:setBaseHeaders(headers)" in source
        assert "function Client:setBaseHeader(name, value)" in source
        assert "function Client:removeBaseHeader(name)" in source

    def test_dispatcher_emitted_once(self, example_tree: PathTreeNode) -> None:
        source = emit_client(example_tree)
        assert source.count("function Client:_request(options)") == 1
        assert source.count("return self.request {") == 1

    def test_empty_tree(self) -> None:
        source = emit_client(PathTreeNode())
        assert "instance." not in source
        assert "  setmetatable(instance, self)\n\n  return instance\nend" in source


# ------------------------------------------------------------------ #
# Namespace walk
# ------------------------------------------------------------------ #


class TestNamespaces:
    def test_nested_tables_in_depth_first_order(self, example_tree: PathTreeNode) -> None:
        source = emit_client(example_tree)
        users = source.index("  instance.users = {}\n")
        flags = source.index("  instance.users.flags = {}\n")
        flags_get = source.index("  instance.users.flags.get = function(...)")
        users_get = source.index("  instance.users.get = function(...)")
        echo = source.index("  instance.echo = {}\n")
        assert users < flags < flags_get < users_get < echo

    def test_methods_in_insertion_order(self, example_tree: PathTreeNode) -> None:
        source = emit_client(example_tree)
        assert source.index("instance.users.get = ") < source.index("instance.users.post = ")

    def test_keyword_segment_uses_brackets(self) -> None:
        source = _emit({"/end/while": {"get": None}})
        assert '  instance["end"] = {}' in source
        assert '  instance["end"]["while"] = {}' in source
        assert '  instance["end"]["while"].get = function(...)' in source

    def test_hyphen_segment_uses_brackets(self) -> None:
        source = _emit({"/user-groups": {"post": None}})
        assert '  instance["user-groups"] = {}' in source
        assert '  instance["user-groups"].post = function(...)' in source

    def test_root_method(self) -> None:
        source = _emit({"/": {"get": None}})
        assert "  instance.get = function(...)" in source
        assert "if __args[1] == instance then" in source


# ------------------------------------------------------------------ #
# Per-method functions
# ------------------------------------------------------------------ #


class TestMethods:
    def test_method_body(self) -> None:
        source = _emit({"/users/{id}/flags": {"get": None}})
        expected = "\n".join([
            "  instance.users.flags.get = function(...)",
            "    local __args = { ... }",
            "    local __offset = 0",
            "    if __args[1] == instance.users.flags then",
            "      __offset = 1",
            "    end",
            "    local id = __args[__offset + 1]",
            "    local __options = __args[__offset + 2] or {}",
            "    return instance:_request {",
            '      url = "/users/" .. id .. "/flags",',
            '      method = "GET",',
            "      body = __options.body,",
            "      headers = __options.headers,",
            "      query = __options.query,",
            "      binary = __options.binary,",
            "      redirect = __options.redirect,",
            "      timeout = __options.timeout",
            "    }",
            "  end",
        ])
        assert expected in source

    def test_no_params_options_first(self) -> None:
        source = _emit({"/echo": {"post": None}})
        assert "    local __options = __args[__offset + 1] or {}" in source
        assert '      url = "/echo",' in source
        assert '      method = "POST",' in source

    def test_extension_marker_stripped(self) -> None:
        source = _emit({"/r": {"get@beta": None}})
        assert "  instance.r.getbeta = function(...)" in source
        assert '      method = "GETBETA",' in source
        assert "@" not in source

    def test_method_token_case_kept_for_field(self) -> None:
        source = _emit({"/r": {"Get": None}})
        assert "  instance.r.Get = function(...)" in source
        assert '      method = "GET",' in source

    def test_hyphenated_method_uses_brackets(self) -> None:
        source = _emit({"/r": {"m-search": None}})
        assert '  instance.r["m-search"] = function(...)' in source
        assert '      method = "M-SEARCH",' in source

    def test_duplicate_params_get_distinct_locals(self) -> None:
        source = _emit({"/orgs/{id}/members/{id}": {"get": None}})
        assert "    local id = __args[__offset + 1]" in source
        assert "    local id_2 = __args[__offset + 2]" in source
        assert '      url = "/orgs/" .. id .. "/members/" .. id_2,' in source

    def test_param_names_sanitized(self) -> None:
        source = _emit({"/groups/{group-id}/{end}": {"get": None}})
        assert "    local group_id = __args[__offset + 1]" in source
        assert "    local end_ = __args[__offset + 2]" in source
        assert '      url = "/groups/" .. group_id .. "/" .. end_,' in source

    def test_param_cannot_shadow_instance(self) -> None:
        source = _emit({"/instances/{instance}": {"get": None}})
        assert "    local instance_2 = __args[__offset + 1]" in source
        assert '      url = "/instances/" .. instance_2,' in source
        assert "    return instance:_request {" in source

    def test_param_cannot_shadow_options(self) -> None:
        source = _emit({"/x/{__options}": {"get": None}})
        assert "    local __options_2 = __args[__offset + 1]" in source
        assert "    local __options = __args[__offset + 2] or {}" in source


# ------------------------------------------------------------------ #
# Feature switches
# ------------------------------------------------------------------ #


class TestFeatureSwitches:
    def test_without_header_support(self) -> None:
        source = _emit({"/r": {"get": None}}, header_support=False)
        assert "baseHeaders" not in source
        assert "setBaseHeader" not in source
        assert "removeBaseHeader" not in source
        assert "  local headers = options.headers" in source
        # Per-call headers are still forwarded.
        assert "      headers = __options.headers," in source

    def test_without_query_support(self) -> None:
        source = _emit({"/r": {"get": None}}, query_support=False)
        assert "encodeQuery" not in source
        assert "encodeComponent" not in source
        assert "query = __options.query" not in source
        assert "  local url = self.baseUrl .. options.url\n" in source

    def test_switches_are_independent(self) -> None:
        source = _emit({"/r": {"get": None}}, header_support=False, query_support=True)
        assert "local function encodeQuery(query)" in source
        assert "setBaseHeaders" not in source

        source = _emit({"/r": {"get": None}}, header_support=True, query_support=False)
        assert "encodeQuery" not in source
        assert "function Client:setBaseHeaders(headers)" in source

    def test_without_receiver_call(self) -> None:
        source = _emit({"/users/{id}": {"get": None}}, receiver_call=False)
        assert "__offset" not in source
        assert "    local id = __args[1]" in source
        assert "    local __options = __args[2] or {}" in source

    def test_all_features_off(self) -> None:
        source = _emit(
            {"/r": {"get": None}},
            header_support=False,
            query_support=False,
            receiver_call=False,
        )
        assert "local Client = {}" in source
        assert "  instance.r.get = function(...)" in source
        assert "return self.request {" in source
