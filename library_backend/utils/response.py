"""
Response building utilities for Library API

Provides functions to create standardized API Gateway responses.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

from .outcome import Ok, Outcome

FAILURE_MESSAGE = "Failed to perform operation"


def convert_decimal(value: Any) -> Any:
    """
    Convert Decimal types (from DynamoDB) to int or float for JSON serialization.

    Args:
        value: Value that might be a Decimal

    Returns:
        Converted value (int if whole number, otherwise float)

    Raises:
        TypeError: If value is not JSON serializable (json.dumps default contract)
    """
    if isinstance(value, Decimal):
        # DynamoDB numbers carry up to 38 digits, beyond the default 28-digit context
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, set):
        # DynamoDB string/number sets
        return sorted(value, key=str)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def api_response(status_code: int, body: Any) -> dict:
    """
    Helper to format API Gateway response with CORS headers.

    Args:
        status_code: HTTP status code
        body: Response body (will be JSON serialized, Decimals converted)

    Returns:
        dict: API Gateway response with headers
    """
    return {
        "statusCode": status_code,
        "body": json.dumps(body, default=convert_decimal),
        "headers": {
            "Content-Type": "application/json",
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Headers": "Content-Type,Authorization",
            "Access-Control-Allow-Methods": "GET, POST, PATCH, DELETE, OPTIONS",
        },
    }


def success_response(method: str, result: Any) -> dict:
    """Wrap an operation result in the standard success envelope."""
    return api_response(
        200,
        {"message": f'Successfully finished operation: "{method}"', "body": result},
    )


def error_response(status_code: int, message: str) -> dict:
    """
    Helper to create a handled (4xx) error response.

    Args:
        status_code: HTTP status code
        message: Error message

    Returns:
        dict: API Gateway error response
    """
    return api_response(status_code, {"message": message})


def failure_response(error: Exception) -> dict:
    """Generic 500 response for unexpected errors."""
    return api_response(500, {"message": FAILURE_MESSAGE, "errorMsg": str(error)})


def outcome_response(method: str, outcome: Outcome) -> dict:
    """Map an operation outcome to its API Gateway response."""
    if isinstance(outcome, Ok):
        return success_response(method, outcome.payload)
    return error_response(outcome.status_code, outcome.message)
