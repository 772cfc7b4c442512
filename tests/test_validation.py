# ==============================================================================
# VALIDATION TESTS
# ==============================================================================
# Tests for field rules, body validation and the list/count envelope
# ==============================================================================

from bson import ObjectId

from resource_api.resources import ORDER
from resource_api.resources.order import (
    order_partial_update_schema_keys,
    order_schema_keys,
)
from resource_api.validation import (
    FieldRule,
    SchemaKeys,
    is_valid_object_id,
    validate_filter,
    validate_params,
)


class TestValidateParams:
    """Tests for request body validation."""

    def test_valid_order(self, sample_order_data: dict):
        result = validate_params(sample_order_data, order_schema_keys)

        assert result.is_valid is True
        assert result.message == ""
        assert result.value["quantity"] == 3

    def test_missing_required_fields_are_all_reported(self):
        result = validate_params({"item": "bolt"}, order_schema_keys)

        assert result.is_valid is False
        assert '"customerName" is required' in result.message
        assert '"quantity" is required' in result.message
        assert '"price" is required' in result.message

    def test_range_and_choices(self, sample_order_data: dict):
        body = {**sample_order_data, "quantity": 0, "status": "lost"}
        result = validate_params(body, order_schema_keys)

        assert result.is_valid is False
        assert '"quantity"' in result.message
        assert '"status"' in result.message

    def test_unknown_keys_are_dropped(self, sample_order_data: dict):
        result = validate_params({**sample_order_data, "color": "red"}, order_schema_keys)

        assert result.is_valid is True
        assert "color" not in result.value

    def test_unset_fields_are_not_filled(self, sample_order_data: dict):
        result = validate_params(sample_order_data, order_schema_keys)

        assert "status" not in result.value
        assert "orderDate" not in result.value

    def test_nullable_field_accepts_null(self, sample_order_data: dict):
        body = {**sample_order_data, "shippingAddress": None}
        result = validate_params(body, order_schema_keys)

        assert result.is_valid is True
        assert result.value["shippingAddress"] is None

    def test_wrong_json_types_are_not_coerced(self, sample_order_data: dict):
        for field, value in (("quantity", True), ("quantity", "3"), ("price", False), ("isActive", "yes"), ("isDeleted", 0)):
            result = validate_params({**sample_order_data, field: value}, order_schema_keys)

            assert result.is_valid is False, (field, value)
            assert f'"{field}"' in result.message

    def test_integer_price_is_a_number(self, sample_order_data: dict):
        result = validate_params({**sample_order_data, "price": 12}, order_schema_keys)

        assert result.is_valid is True
        assert result.value["price"] == 12

    def test_non_object_body(self):
        result = validate_params(["not", "an", "object"], order_schema_keys)

        assert result.is_valid is False
        assert "object" in result.message

    def test_partial_update_requires_nothing(self):
        result = validate_params({"quantity": 7}, order_partial_update_schema_keys)

        assert result.is_valid is True
        assert result.value == {"quantity": 7}

    def test_partial_update_still_checks_types(self):
        result = validate_params({"price": -1}, order_partial_update_schema_keys)

        assert result.is_valid is False
        assert '"price"' in result.message

    def test_plain_rule_mapping(self):
        rules = {"code": FieldRule(type="string", required=True, pattern=r"^[A-Z]{3}$")}

        assert validate_params({"code": "ABC"}, rules).is_valid is True
        assert validate_params({"code": "abc"}, rules).is_valid is False


class TestSchemaKeys:
    """Tests for rule tables."""

    def test_required_fields(self):
        assert sorted(order_schema_keys.required_fields()) == [
            "customerName", "item", "price", "quantity",
        ]

    def test_defaults(self):
        assert order_schema_keys.defaults() == {
            "status": "pending",
            "isActive": True,
            "isDeleted": False,
        }

    def test_relaxed_excludes_fields(self):
        keys = SchemaKeys("Sample", {
            "name": FieldRule(required=True),
            "owner": FieldRule(type="objectId"),
        })
        relaxed = keys.relaxed("SampleRelaxed", exclude=["owner"])

        assert relaxed.field_names() == ["name"]
        assert relaxed.required_fields() == []

    def test_object_id_rule(self):
        keys = SchemaKeys("Ref", {"owner": FieldRule(type="objectId", required=True)})

        assert validate_params({"owner": str(ObjectId())}, keys).is_valid is True
        assert validate_params({"owner": "nope"}, keys).is_valid is False


class TestValidateFilter:
    """Tests for the list/count envelope."""

    def test_empty_envelope(self):
        result = validate_filter({})

        assert result.is_valid is True
        assert result.value == {}

    def test_none_is_empty(self):
        assert validate_filter(None).is_valid is True

    def test_unknown_top_level_key(self):
        result = validate_filter({"filter": {}})

        assert result.is_valid is False
        assert '"filter" is not allowed' in result.message

    def test_invalid_options(self):
        result = validate_filter({"options": {"page": 0, "limit": 5}})

        assert result.is_valid is False
        assert "options.page" in result.message

    def test_unknown_option(self):
        result = validate_filter({"options": {"lean": True}})

        assert result.is_valid is False

    def test_query_fields_checked_against_model(self):
        fields = ["item", "quantity"]

        assert validate_filter({"query": {"item": "bolt"}}, model_fields=fields).is_valid
        assert validate_filter({"query": {"createdAt": {"$gte": "2024-01-01"}}}, model_fields=fields).is_valid

        result = validate_filter({"where": {"$or": [{"item": "a"}, {"colour": "b"}]}}, model_fields=fields)
        assert result.is_valid is False
        assert '"colour" is not allowed' in result.message

    def test_operators_outside_logical_clauses_rejected(self):
        fields = ORDER.model_fields()

        for query in (
            {"$where": "sleep(1000) || true"},
            {"$expr": {"$gt": ["$price", 0]}},
            {"$or": [{"item": "bolt"}, {"$where": "true"}]},
        ):
            result = validate_filter({"query": query}, model_fields=fields)
            assert result.is_valid is False, query
            assert "is not allowed" in result.message

        result = validate_filter({"where": {"$where": "true"}}, model_fields=fields)
        assert result.message == '"$where" is not allowed'

    def test_field_operators_still_allowed(self):
        result = validate_filter(
            {"query": {"quantity": {"$gte": 2}, "status": {"$in": ["pending", "shipped"]}}},
            model_fields=ORDER.model_fields(),
        )

        assert result.is_valid is True

    def test_mixed_projection_rejected(self):
        for select in ("item -price", ["item", "-price"], {"item": 1, "price": 0}):
            result = validate_filter({"options": {"select": select}})

            assert result.is_valid is False, select
            assert "options.select" in result.message

    def test_projection_may_drop_identity(self):
        for select in ("item -id", "-price -quantity", {"item": 1, "_id": 0}):
            assert validate_filter({"options": {"select": select}}).is_valid is True, select

    def test_null_values_survive(self):
        result = validate_filter({"query": {"shippingAddress": None}})

        assert result.value["query"] == {"shippingAddress": None}


class TestObjectId:
    """Tests for identity checks."""

    def test_valid(self):
        assert is_valid_object_id(str(ObjectId())) is True
        assert is_valid_object_id(ObjectId()) is True

    def test_invalid(self):
        assert is_valid_object_id("123") is False
        assert is_valid_object_id(None) is False
        assert is_valid_object_id(42) is False
