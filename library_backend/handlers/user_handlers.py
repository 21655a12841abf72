"""
Lambda handler for user operations (list, get, get by role, create, update, delete)
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from botocore.exceptions import ClientError

# Support both Lambda deployment and local development
try:
    # Lambda deployment
    import config
    from utils.dynamodb import RecordStore
    from utils.outcome import BadRequest, NotFound, Ok, Outcome, UnsupportedMethodError
    from utils.response import failure_response, outcome_response
    from utils.validation import get_path_param, get_query_param, parse_json_body, update_fields
except ImportError:
    # Local development
    import library_backend.config as config
    from library_backend.utils.dynamodb import RecordStore
    from library_backend.utils.outcome import BadRequest, NotFound, Ok, Outcome, UnsupportedMethodError
    from library_backend.utils.response import failure_response, outcome_response
    from library_backend.utils.validation import (
        get_path_param,
        get_query_param,
        parse_json_body,
        update_fields,
    )

logger = logging.getLogger()
logger.setLevel(config.LOG_LEVEL)


class UserHandler:
    """Routes API Gateway user requests by HTTP method."""

    def __init__(self, users: RecordStore):
        self.users = users

    def __call__(self, event: dict, context: Any) -> dict:
        method = event.get("httpMethod")
        logger.info(f"user_handler invoked: {method}")

        try:
            if method == "GET":
                outcome = self._handle_get(event)
            elif method == "POST":
                outcome = self._handle_create(event)
            elif method == "DELETE":
                outcome = self._handle_delete(event)
            elif method == "PATCH":
                outcome = self._handle_update(event)
            else:
                raise UnsupportedMethodError(f'Unsupported route: "{method}"')

            if not isinstance(outcome, Ok):
                logger.warning(f"{method} user rejected ({outcome.status_code}): {outcome.message}")
            return outcome_response(method, outcome)

        except Exception as e:
            logger.error(f"Error performing {method} on users: {str(e)}", exc_info=True)
            return failure_response(e)

    # Request parsing

    def _handle_get(self, event: dict) -> Outcome:
        if event.get("queryStringParameters"):
            user_uuid, error = get_path_param(event, "id")
            if error:
                return error
            role = get_query_param(event, "role")
            if not role:
                return BadRequest("Role is required in query string")
            return self.get_by_role(user_uuid, role)

        if (event.get("pathParameters") or {}).get("id"):
            user_uuid, _ = get_path_param(event, "id")
            return self.get(user_uuid)

        return self.list_users()

    def _handle_create(self, event: dict) -> Outcome:
        body, error = parse_json_body(event)
        if error:
            return error
        return self.create(body)

    def _handle_delete(self, event: dict) -> Outcome:
        user_uuid, error = get_path_param(event, "id")
        if error:
            return error
        return self.delete(user_uuid)

    def _handle_update(self, event: dict) -> Outcome:
        user_uuid, error = get_path_param(event, "id")
        if error:
            return error

        body, error = parse_json_body(event)
        if error:
            return error
        fields, error = update_fields(body, config.USER_KEY)
        if error:
            return error
        return self.update(user_uuid, fields)

    # Operations

    def list_users(self) -> Outcome:
        users = self.users.scan()
        logger.info(f"Retrieved {len(users)} users")
        return Ok(users)

    def get(self, user_uuid: str) -> Outcome:
        return Ok(self.users.get(user_uuid) or {})

    def get_by_role(self, user_uuid: str, role: str) -> Outcome:
        """The user with this uuid, kept only if its role contains the given text."""
        users = self.users.query(
            key_condition="#uuid = :userUuid",
            filter_expression="contains(#role, :role)",
            names={"#uuid": config.USER_KEY, "#role": "role"},
            values={":userUuid": user_uuid, ":role": role},
        )
        return Ok(users)

    def create(self, user: dict[str, Any]) -> Outcome:
        user[config.USER_KEY] = str(uuid.uuid4())
        return Ok(self.users.put(user))

    def delete(self, user_uuid: str) -> Outcome:
        self.users.delete(user_uuid)
        return Ok({config.USER_KEY: user_uuid})

    def update(self, user_uuid: str, fields: dict[str, Any]) -> Outcome:
        try:
            updated = self.users.update(user_uuid, fields, require_existing=True)
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":  # type: ignore[typeddict-item]
                return NotFound("User not found")
            raise
        return Ok(updated)


_handler: UserHandler | None = None


def _get_handler() -> UserHandler:
    """Build the process-wide handler from config on first use."""
    global _handler
    if _handler is None:
        _handler = UserHandler(users=RecordStore(config.get_users_table(), config.USER_KEY))
    return _handler


def user_handler(event, context):
    """Lambda entry point for the users API."""
    return _get_handler()(event, context)
