"""
Filter DSL for dynalock scans.

DynCondition wraps a boto3 condition and Attr builds them. Expression strings,
placeholders and reserved-word escaping are left to boto3's
ConditionExpressionBuilder; this module only compiles the result into the
FilterExpression parameters of a low-level scan.

Usage:
    from dynalock import Attr

    table.scan().filter(Attr("ownerName") == "worker-1")
    table.scan().filter(Attr("isReleased").not_exists() & Attr("leaseDuration").exists())
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Union

from boto3.dynamodb.conditions import And as Boto3And
from boto3.dynamodb.conditions import Attr as Boto3Attr
from boto3.dynamodb.conditions import ConditionBase as Boto3ConditionBase
from boto3.dynamodb.conditions import ConditionExpressionBuilder
from boto3.dynamodb.conditions import Not as Boto3Not
from boto3.dynamodb.conditions import Or as Boto3Or

if TYPE_CHECKING:
    from .serializer import DynamoSerializer

# Accepted wherever a filter is expected: our wrapper or a raw boto3 condition
Condition = Union["DynCondition", Boto3ConditionBase]


class DynCondition:
    """
    A composable filter condition.

    Attributes:
        raw: The underlying boto3 ConditionBase
    """

    __slots__ = ("raw",)

    def __init__(self, raw: Boto3ConditionBase) -> None:
        self.raw = raw

    def __and__(self, other: Condition) -> DynCondition:
        return DynCondition(Boto3And(self.raw, _extract_raw(other)))

    def __rand__(self, other: Condition) -> DynCondition:
        return DynCondition(Boto3And(_extract_raw(other), self.raw))

    def __or__(self, other: Condition) -> DynCondition:
        return DynCondition(Boto3Or(self.raw, _extract_raw(other)))

    def __ror__(self, other: Condition) -> DynCondition:
        return DynCondition(Boto3Or(_extract_raw(other), self.raw))

    def __invert__(self) -> DynCondition:
        return DynCondition(Boto3Not(self.raw))

    def __repr__(self) -> str:
        return f"DynCondition({self.raw!r})"


class Attr:
    """
    A DynamoDB attribute reference for building filter conditions.

    Usage:
        Attr("ownerName") == "worker-1"
        Attr("leaseDuration").between("1000", "60000")
        Attr("isReleased").not_exists()
    """

    __slots__ = ("name", "_boto3_attr")

    def __init__(self, name: str) -> None:
        self.name = name
        self._boto3_attr = Boto3Attr(name)

    def __eq__(self, value: Any) -> DynCondition:  # type: ignore[override]
        return DynCondition(self._boto3_attr.eq(value))

    def __ne__(self, value: Any) -> DynCondition:  # type: ignore[override]
        return DynCondition(self._boto3_attr.ne(value))

    def __lt__(self, value: Any) -> DynCondition:
        return DynCondition(self._boto3_attr.lt(value))

    def __le__(self, value: Any) -> DynCondition:
        return DynCondition(self._boto3_attr.lte(value))

    def __gt__(self, value: Any) -> DynCondition:
        return DynCondition(self._boto3_attr.gt(value))

    def __ge__(self, value: Any) -> DynCondition:
        return DynCondition(self._boto3_attr.gte(value))

    def exists(self) -> DynCondition:
        return DynCondition(self._boto3_attr.exists())

    def not_exists(self) -> DynCondition:
        """True for records without the attribute, e.g. locks that were never released."""
        return DynCondition(self._boto3_attr.not_exists())

    def begins_with(self, prefix: str) -> DynCondition:
        return DynCondition(self._boto3_attr.begins_with(prefix))

    def contains(self, value: Any) -> DynCondition:
        """Substring match for strings, membership for lists and sets."""
        return DynCondition(self._boto3_attr.contains(value))

    def between(self, low: Any, high: Any) -> DynCondition:
        """Inclusive range check."""
        return DynCondition(self._boto3_attr.between(low, high))

    def is_in(self, values: list[Any]) -> DynCondition:
        return DynCondition(self._boto3_attr.is_in(values))

    def __repr__(self) -> str:
        return f"Attr({self.name!r})"


def _extract_raw(condition: Condition) -> Boto3ConditionBase:
    if isinstance(condition, DynCondition):
        return condition.raw
    if isinstance(condition, Boto3ConditionBase):
        return condition
    raise TypeError(
        f"Expected DynCondition or boto3 ConditionBase, got {type(condition).__name__}"
    )


def wrap_condition(condition: Condition) -> DynCondition:
    """Returns the condition as a DynCondition, wrapping raw boto3 conditions."""
    if isinstance(condition, DynCondition):
        return condition
    return DynCondition(_extract_raw(condition))


def compile_filter(condition: Condition, serializer: DynamoSerializer) -> dict[str, Any]:
    """
    Compiles a condition into low-level scan parameters.

    Returns:
        Dict with FilterExpression, and ExpressionAttributeNames /
        ExpressionAttributeValues when the expression uses placeholders.
        Values are serialized to DynamoDB JSON.
    """
    builder = ConditionExpressionBuilder()
    expression = builder.build_expression(_extract_raw(condition), is_key_condition=False)

    result: dict[str, Any] = {"FilterExpression": expression.condition_expression}

    if expression.attribute_name_placeholders:
        result["ExpressionAttributeNames"] = dict(expression.attribute_name_placeholders)

    if expression.attribute_value_placeholders:
        result["ExpressionAttributeValues"] = {
            placeholder: serializer.to_dynamo_value(value)
            for placeholder, value in expression.attribute_value_placeholders.items()
        }

    return result
