"""
Unit tests for the filter DSL.

These tests verify:
1. Attr builds DynCondition instances wrapping boto3 conditions
2. Composition with &, |, ~ keeps returning DynCondition
3. Raw boto3 conditions are accepted
4. compile_filter produces FilterExpression parameters with serialized values
"""

import pytest
from boto3.dynamodb.conditions import Attr as Boto3Attr
from boto3.dynamodb.conditions import ConditionBase as Boto3ConditionBase

from dynalock.conditions import Attr, DynCondition, compile_filter, wrap_condition
from dynalock.serializer import DynamoSerializer


@pytest.mark.unit
class TestAttrBuilder:
    def test_attr_creation(self):
        assert Attr("ownerName").name == "ownerName"
        assert repr(Attr("ownerName")) == "Attr('ownerName')"

    @pytest.mark.parametrize(
        "condition",
        [
            Attr("ownerName") == "worker-1",
            Attr("ownerName") != "worker-1",
            Attr("attempts") < 3,
            Attr("attempts") <= 3,
            Attr("attempts") > 3,
            Attr("attempts") >= 3,
            Attr("isReleased").exists(),
            Attr("isReleased").not_exists(),
            Attr("key").begins_with("orders/"),
            Attr("tags").contains("critical"),
            Attr("attempts").between(1, 5),
            Attr("ownerName").is_in(["worker-1", "worker-2"]),
        ],
    )
    def test_every_builder_returns_dyncondition(self, condition):
        assert isinstance(condition, DynCondition)
        assert isinstance(condition.raw, Boto3ConditionBase)


@pytest.mark.unit
class TestComposition:
    def test_and_or_not(self):
        condition = (
            (Attr("ownerName") == "worker-1") | (Attr("ownerName") == "worker-2")
        ) & ~Attr("isReleased").exists()

        assert isinstance(condition, DynCondition)

    def test_mixed_with_raw_boto3(self):
        boto3_cond = Boto3Attr("x").eq(1)
        dyn_cond = Attr("y") == 2

        assert isinstance(dyn_cond & boto3_cond, DynCondition)
        assert isinstance(dyn_cond | boto3_cond, DynCondition)

    def test_wrap_condition(self):
        dyn_cond = Attr("y") == 2
        assert wrap_condition(dyn_cond) is dyn_cond

        raw = Boto3Attr("x").eq(1)
        assert wrap_condition(raw).raw is raw

    def test_wrap_rejects_other_types(self):
        with pytest.raises(TypeError, match="str"):
            wrap_condition("ownerName = worker-1")


@pytest.mark.unit
class TestCompileFilter:
    def setup_method(self):
        self.serializer = DynamoSerializer()

    def test_simple_condition(self):
        result = compile_filter(Attr("ownerName") == "worker-1", self.serializer)

        assert result == {
            "FilterExpression": "#n0 = :v0",
            "ExpressionAttributeNames": {"#n0": "ownerName"},
            "ExpressionAttributeValues": {":v0": {"S": "worker-1"}},
        }

    def test_values_are_serialized(self):
        condition = (Attr("attempts") > 2) & (Attr("ratio") <= 0.5)
        values = compile_filter(condition, self.serializer)["ExpressionAttributeValues"]

        assert {"N": "2"} in values.values()
        assert {"N": "0.5"} in values.values()

    def test_condition_without_values(self):
        result = compile_filter(Attr("isReleased").not_exists(), self.serializer)

        assert result["FilterExpression"] == "attribute_not_exists(#n0)"
        assert "ExpressionAttributeValues" not in result

    def test_raw_boto3_condition(self):
        result = compile_filter(Boto3Attr("ownerName").exists(), self.serializer)

        assert "ownerName" in result["ExpressionAttributeNames"].values()
