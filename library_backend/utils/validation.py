"""
Request validation utilities for Library API

Provides functions to validate and extract data from API Gateway events.
Each returns a (value, error) tuple where error is a BadRequest outcome or None.
"""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any
from urllib.parse import unquote

from .outcome import BadRequest

logger = logging.getLogger()


def get_path_param(event: dict, param: str) -> tuple[str | None, BadRequest | None]:
    """
    Extract and URL-decode a path parameter from API Gateway event.

    Args:
        event: API Gateway event
        param: Parameter name to extract

    Returns:
        tuple: (decoded_value, error) - If successful, error is None
    """
    path_params = event.get("pathParameters") or {}
    if not path_params.get(param):
        logger.warning(f"Missing {param} in path parameters")
        return None, BadRequest(f"{param.capitalize()} is required in path")
    return unquote(path_params[param]), None


def get_query_param(event: dict, param: str) -> str | None:
    """Return a query string parameter, or None when absent."""
    query_params = event.get("queryStringParameters") or {}
    return query_params.get(param)


def parse_json_body(event: dict) -> tuple[dict[str, Any], BadRequest | None]:
    """
    Parse a JSON object body from API Gateway event.

    Numbers with a fractional part are parsed as Decimal, since DynamoDB
    does not accept float values.

    Args:
        event: API Gateway event

    Returns:
        tuple: (parsed_body, error) - If successful, error is None
               If error, parsed_body is empty dict (caller should check error first)
    """
    try:
        body = json.loads(event.get("body") or "{}", parse_float=Decimal)
    except json.JSONDecodeError:
        logger.warning("Invalid JSON in request body")
        return {}, BadRequest("Invalid JSON in request body")

    if not isinstance(body, dict):
        logger.warning("Request body is not a JSON object")
        return {}, BadRequest("Request body must be a JSON object")

    return body, None


def update_fields(body: dict[str, Any], key_name: str) -> tuple[dict[str, Any], BadRequest | None]:
    """
    Select the fields of an update request.

    Primary keys are immutable, so the key attribute is dropped from the field set.

    Returns:
        tuple: (fields, error) - error is set when nothing is left to update
    """
    fields = {field: value for field, value in body.items() if field != key_name}
    if not fields:
        return {}, BadRequest("No valid fields to update")
    return fields, None
