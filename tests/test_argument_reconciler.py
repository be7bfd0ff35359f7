# Argument Reconciler Tests
"""Tests for argument parsing, coercion, normalization and schema widening."""

import copy

import pytest
from jsonschema import Draft202012Validator

from notion_mcp.services.argument_reconciler import (
    coerce_primitive_types,
    expects_type,
    normalize_request_payload,
    parse_stringified_structures,
    reconcile_arguments,
    widen_object_schemas,
)

PAGE_SCHEMA = {
    "type": "object",
    "properties": {
        "parent": {
            "type": "object",
            "properties": {"page_id": {"type": "string"}},
        },
        "properties": {"type": "object", "additionalProperties": True},
        "children": {"type": "array", "items": {"type": "object"}},
        "page_size": {"type": "integer"},
        "archived": {"type": "boolean"},
        "ratio": {"type": "number"},
    },
}


class TestExpectsType:
    """Test schema type inspection."""

    def test_direct_type(self):
        """Test a plain type declaration."""
        assert expects_type({"type": "object"}, "object") is True
        assert expects_type({"type": "string"}, "object") is False

    def test_type_list(self):
        """Test type arrays."""
        assert expects_type({"type": ["object", "null"]}, "object") is True

    def test_union_branches(self):
        """Test any branch of oneOf/anyOf/allOf counts."""
        schema = {"oneOf": [{"type": "string"}, {"anyOf": [{"type": "array"}]}]}
        assert expects_type(schema, "array") is True
        assert expects_type(schema, "object") is False


class TestStringifiedStructures:
    """Test recovery of stringified objects and arrays."""

    def test_object_string_parsed(self):
        """Test a JSON object string under an object node is parsed."""
        result = parse_stringified_structures({"parent": '{"page_id":"x"}'}, PAGE_SCHEMA)
        assert result == {"parent": {"page_id": "x"}}

    def test_array_string_parsed(self):
        """Test a JSON array string under an array node is parsed."""
        result = parse_stringified_structures({"children": '[{"type": "paragraph"}]'}, PAGE_SCHEMA)
        assert result == {"children": [{"type": "paragraph"}]}

    def test_invalid_json_left_untouched(self):
        """Test unparseable strings are kept as-is."""
        result = parse_stringified_structures({"parent": "not valid json {{{"}, PAGE_SCHEMA)
        assert result == {"parent": "not valid json {{{"}

    def test_scalar_json_left_untouched(self):
        """Test strings parsing to scalars are kept as strings."""
        result = parse_stringified_structures({"parent": "42"}, PAGE_SCHEMA)
        assert result == {"parent": "42"}

    def test_string_nodes_not_parsed(self):
        """Test strings under string nodes are never parsed."""
        schema = {"type": "object", "properties": {"query": {"type": "string"}}}
        result = parse_stringified_structures({"query": '{"a": 1}'}, schema)
        assert result == {"query": '{"a": 1}'}

    def test_union_with_object_branch(self):
        """Test union nodes with any object branch are parsed."""
        schema = {
            "type": "object",
            "properties": {"filter": {"oneOf": [{"type": "string"}, {"type": "object"}]}},
        }
        # string branch does not stop parsing; an object branch exists
        result = parse_stringified_structures({"filter": '{"property": "title"}'}, schema)
        assert result == {"filter": {"property": "title"}}

    def test_nested_stringified_values(self):
        """Test recursion into parsed structures uses nested schemas."""
        schema = {
            "type": "object",
            "properties": {
                "outer": {
                    "type": "object",
                    "properties": {
                        "inner": {"type": "object", "properties": {"v": {"type": "string"}}},
                    },
                },
            },
        }
        value = {"outer": '{"inner": "{\\"v\\": \\"x\\"}"}'}
        assert parse_stringified_structures(value, schema) == {"outer": {"inner": {"v": "x"}}}


class TestPrimitiveCoercion:
    """Test string to integer/number/boolean coercion."""

    @pytest.mark.parametrize(
        "field, raw, expected",
        [
            ("page_size", "20", 20),
            ("ratio", "19.99", 19.99),
            ("ratio", "3", 3),
            ("archived", "true", True),
            ("archived", "TRUE", True),
            ("archived", "False", False),
            ("page_size", "-7", -7),
            ("ratio", "1e3", 1000.0),
            ("ratio", "12345678901234567890", 12345678901234567890),
        ],
    )
    def test_valid_literals_coerced(self, field, raw, expected):
        """Test valid literals become their typed value."""
        result = coerce_primitive_types({field: raw}, PAGE_SCHEMA)
        assert result[field] == expected
        assert type(result[field]) is type(expected)

    @pytest.mark.parametrize(
        "field, raw",
        [
            ("page_size", "not-a-number"),
            ("page_size", "1.5"),
            ("ratio", "nan"),
            ("ratio", "inf"),
            ("ratio", "1e999"),
            ("page_size", "1_000"),
            ("page_size", " 5"),
            ("page_size", "+5"),
            ("page_size", "\u0663"),
            ("ratio", " 1.5 "),
            ("ratio", "1_0.5"),
            ("ratio", ".5"),
            ("archived", "yes"),
        ],
    )
    def test_invalid_literals_unchanged(self, field, raw):
        """Test non-literals stay strings."""
        assert coerce_primitive_types({field: raw}, PAGE_SCHEMA) == {field: raw}

    def test_array_items_coerced(self):
        """Test element-wise coercion through items."""
        schema = {"type": "array", "items": {"type": "integer"}}
        assert coerce_primitive_types(["1", "2", "x"], schema) == [1, 2, "x"]

    def test_unknown_keys_pass_through(self):
        """Test properties absent from the schema are untouched."""
        result = coerce_primitive_types({"extra": "20", "page_size": "5"}, PAGE_SCHEMA)
        assert result == {"extra": "20", "page_size": 5}

    def test_none_passes_through(self):
        """Test None values are kept."""
        assert coerce_primitive_types({"page_size": None}, PAGE_SCHEMA) == {"page_size": None}


class TestRichTextNormalization:
    """Test rich text annotation placement fixes."""

    def test_annotations_moved_out_of_text(self):
        """Test text.annotations moves to the rich text item."""
        payload = {
            "paragraph": {
                "rich_text": [
                    {"type": "text", "text": {"content": "Hi", "annotations": {"bold": True}}},
                ],
            },
        }
        result = normalize_request_payload(payload)
        item = result["paragraph"]["rich_text"][0]
        assert item["annotations"] == {"bold": True}
        assert item["text"] == {"content": "Hi"}

    def test_existing_annotations_kept(self):
        """Test item-level annotations win over misplaced ones."""
        payload = {
            "rich_text": [
                {
                    "text": {"content": "Hi", "annotations": {"bold": True}},
                    "annotations": {"italic": True},
                },
            ],
        }
        item = normalize_request_payload(payload)["rich_text"][0]
        assert item["annotations"] == {"italic": True}
        assert "annotations" not in item["text"]

    def test_nested_children_normalized(self):
        """Test rich text inside nested blocks is normalized."""
        payload = {
            "children": [
                {"toggle": {"rich_text": [{"text": {"content": "a", "annotations": {"code": True}}}]}},
            ],
        }
        item = normalize_request_payload(payload)["children"][0]["toggle"]["rich_text"][0]
        assert item["annotations"] == {"code": True}

    def test_input_not_mutated(self):
        """Test normalization returns new structures."""
        payload = {"rich_text": [{"text": {"content": "a", "annotations": {"bold": True}}}]}
        original = copy.deepcopy(payload)
        normalize_request_payload(payload)
        assert payload == original


class TestReconcileArguments:
    """Test the full reconciliation pipeline."""

    def test_stringified_and_primitive_together(self):
        """Test parsing and coercion apply in one pass."""
        result = reconcile_arguments(
            {"parent": '{"page_id": "abc"}', "page_size": "10", "archived": "false"},
            PAGE_SCHEMA,
        )
        assert result == {"parent": {"page_id": "abc"}, "page_size": 10, "archived": False}

    def test_correctly_typed_arguments_unchanged(self):
        """Test reconciling well-typed arguments is the identity."""
        arguments = {
            "parent": {"page_id": "abc"},
            "properties": {"title": [{"text": {"content": "T"}}]},
            "children": [{"type": "paragraph"}],
            "page_size": 10,
            "archived": True,
            "ratio": 0.5,
        }
        assert reconcile_arguments(copy.deepcopy(arguments), PAGE_SCHEMA) == arguments

    def test_empty_arguments(self):
        """Test missing arguments reconcile to an empty mapping."""
        assert reconcile_arguments(None, PAGE_SCHEMA) == {}


class TestWidenObjectSchemas:
    """Test widening of advertised schemas."""

    def test_root_stays_object(self):
        """Test the root node is not wrapped."""
        widened = widen_object_schemas(PAGE_SCHEMA)
        assert widened["type"] == "object"
        assert "anyOf" not in widened

    def test_nested_objects_accept_strings(self):
        """Test nested object nodes become string-or-object unions."""
        widened = widen_object_schemas(PAGE_SCHEMA)
        parent = widened["properties"]["parent"]
        assert parent["anyOf"][0] == {"type": "string"}
        assert parent["anyOf"][1]["properties"]["page_id"] == {"type": "string"}
        assert widened["properties"]["children"]["items"]["anyOf"][0] == {"type": "string"}

    def test_primitives_untouched(self):
        """Test non-object nodes are unchanged."""
        widened = widen_object_schemas(PAGE_SCHEMA)
        assert widened["properties"]["page_size"] == {"type": "integer"}

    def test_original_not_mutated(self):
        """Test widening works on a copy."""
        original = copy.deepcopy(PAGE_SCHEMA)
        widen_object_schemas(PAGE_SCHEMA)
        assert PAGE_SCHEMA == original

    def test_widened_schema_accepts_stringified_objects(self):
        """Test stringified and structured arguments both validate."""
        schema = copy.deepcopy(PAGE_SCHEMA)
        schema["properties"]["parent"]["additionalProperties"] = False
        validator = Draft202012Validator(widen_object_schemas(schema))
        assert validator.is_valid({"parent": '{"page_id": "abc"}'})
        assert validator.is_valid({"parent": {"page_id": "abc"}})
        assert not validator.is_valid({"parent": {"page_id": "abc", "x": 1}})

        strict = Draft202012Validator(schema)
        assert not strict.is_valid({"parent": '{"page_id": "abc"}'})
