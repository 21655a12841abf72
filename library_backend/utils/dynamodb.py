"""
DynamoDB utilities for Library API

Provides the record store used by every handler and helpers for building
DynamoDB update expressions. The boto3 Table resource takes care of
marshalling items to and from DynamoDB attribute values.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from mypy_boto3_dynamodb.service_resource import Table

logger = logging.getLogger()


def build_update_expression(
    fields: dict[str, Any],
) -> tuple[str, dict[str, Any], dict[str, str]]:
    """
    Build DynamoDB SET expression from a dictionary of fields.

    Field names are arbitrary client input, so both names and values go
    through indexed placeholders (#key0 / :value0). This sidesteps reserved
    words (e.g. "role", "name") and characters that are not valid in an
    expression.

    Args:
        fields: Dictionary of field names to values

    Returns:
        tuple: (update_expression, expression_attribute_values, expression_attribute_names)

    Example:
        fields = {"title": "Dune", "role": "Author"}
        expr, values, names = build_update_expression(fields)
        # expr = "SET #key0 = :value0, #key1 = :value1"
        # values = {":value0": "Dune", ":value1": "Author"}
        # names = {"#key0": "title", "#key1": "role"}
    """
    set_parts = []
    expr_attr_values: dict[str, Any] = {}
    expr_attr_names: dict[str, str] = {}

    for index, (field, value) in enumerate(fields.items()):
        name_placeholder = f"#key{index}"
        value_placeholder = f":value{index}"

        expr_attr_names[name_placeholder] = field
        expr_attr_values[value_placeholder] = value
        set_parts.append(f"{name_placeholder} = {value_placeholder}")

    update_expression = "SET " + ", ".join(set_parts) if set_parts else ""

    return update_expression, expr_attr_values, expr_attr_names


def build_update_params(
    key: Dict[str, Any],
    fields: Dict[str, Any],
    require_existing: bool = False,
    return_values: str = "ALL_NEW"
) -> Dict[str, Any]:
    """
    Build complete DynamoDB update_item parameters.

    Args:
        key: Primary key for the item to update
        fields: Dictionary of field names to values (must not be empty)
        require_existing: If True, only update an item that already exists
            (the update fails with ConditionalCheckFailedException otherwise)
        return_values: Return values option (default: ALL_NEW)

    Returns:
        dict: Complete parameters for table.update_item()

    Raises:
        ValueError: If fields is empty

    Example:
        params = build_update_params(
            key={"uuid": "user-123"},
            fields={"role": "Author"},
            require_existing=True,
        )
        response = table.update_item(**params)
    """
    if not fields:
        raise ValueError("At least one field is required for an update")

    update_expression, expr_values, expr_names = build_update_expression(fields)

    params = {
        "Key": key,
        "UpdateExpression": update_expression,
        "ExpressionAttributeNames": expr_names,
        "ExpressionAttributeValues": expr_values,
        "ReturnValues": return_values,
    }

    if require_existing:
        # The key attribute gets its own placeholder so it cannot collide with #keyN
        key_name = next(iter(key))
        params["ExpressionAttributeNames"]["#pk"] = key_name
        params["ConditionExpression"] = "attribute_exists(#pk)"

    return params


class RecordStore:
    """
    Item-level access to a single DynamoDB table.

    Every method is a single round trip (query and scan follow
    LastEvaluatedKey until the result set is exhausted). ClientError from
    botocore is never caught here; callers decide how to surface it.
    """

    def __init__(self, table: "Table", key_name: str):
        self.table = table
        self.key_name = key_name

    @property
    def name(self) -> str:
        return getattr(self.table, "name", "<table>")

    def put(self, item: dict[str, Any]) -> dict[str, Any]:
        """Write a full item, replacing any existing item with the same key. Returns the item."""
        self.table.put_item(Item=item)
        logger.info(f"Put item {item.get(self.key_name)} into {self.name}")
        return item

    def get(self, key_value: str) -> dict[str, Any] | None:
        """Point lookup by primary key. Returns None when the item does not exist."""
        response = self.table.get_item(Key={self.key_name: key_value})
        return response.get("Item")

    def delete(self, key_value: str) -> dict[str, Any]:
        """Delete by primary key. Returns the deleted attributes ({} if nothing was stored)."""
        response = self.table.delete_item(
            Key={self.key_name: key_value}, ReturnValues="ALL_OLD"
        )
        logger.info(f"Deleted item {key_value} from {self.name}")
        return response.get("Attributes", {})

    def update(
        self, key_value: str, fields: dict[str, Any], require_existing: bool = False
    ) -> dict[str, Any]:
        """
        Set exactly the given fields on an item, leaving all others untouched.

        Returns:
            dict: The full item after the update
        """
        params = build_update_params(
            key={self.key_name: key_value},
            fields=fields,
            require_existing=require_existing,
        )
        response = self.table.update_item(**params)
        logger.info(f"Updated {self.name} item {key_value} fields: {list(fields.keys())}")
        return response.get("Attributes", {})

    def query(
        self,
        key_condition: str,
        values: dict[str, Any],
        names: dict[str, str] | None = None,
        index_name: str | None = None,
        filter_expression: str | None = None,
    ) -> list[dict[str, Any]]:
        """Query the table (or a secondary index) and return all matching items."""
        params: dict[str, Any] = {
            "KeyConditionExpression": key_condition,
            "ExpressionAttributeValues": values,
        }
        if names:
            params["ExpressionAttributeNames"] = names
        if index_name:
            params["IndexName"] = index_name
        if filter_expression:
            params["FilterExpression"] = filter_expression

        response = self.table.query(**params)
        items = response.get("Items", [])

        while "LastEvaluatedKey" in response:
            response = self.table.query(ExclusiveStartKey=response["LastEvaluatedKey"], **params)
            items.extend(response.get("Items", []))

        return items

    def scan(self) -> list[dict[str, Any]]:
        """Return every item in the table."""
        response = self.table.scan()
        items = response.get("Items", [])

        # Handle pagination if needed
        while "LastEvaluatedKey" in response:
            response = self.table.scan(ExclusiveStartKey=response["LastEvaluatedKey"])
            items.extend(response.get("Items", []))

        return items
