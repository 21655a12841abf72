"""
Configuration and AWS client initialization for Library API Lambda handlers

This module provides:
- Environment variable configuration
- Lazily created AWS service clients (DynamoDB, SNS, Cognito), reused across
  invocations within the same execution environment
- Constants used across handlers
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import boto3
from botocore.config import Config

if TYPE_CHECKING:
    from mypy_boto3_cognito_idp.client import CognitoIdentityProviderClient
    from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table
    from mypy_boto3_sns.client import SNSClient

# Constants
AUTHOR_ROLE = "Author"
BOOK_KEY = "bookUuid"
USER_KEY = "uuid"
OWNER_ATTRIBUTE = "userUuid"

# Environment configuration
REGION = os.environ.get("REGION", "us-east-2")
BOOKS_TABLE_NAME = os.environ.get("BOOKS_TABLE", "books")
USERS_TABLE_NAME = os.environ.get("USERS_TABLE", "user")
BOOKS_OWNER_INDEX = os.environ.get("BOOKS_OWNER_INDEX", "userUuid-index")
BOOK_CREATED_TOPIC = os.environ.get("BOOK_CREATED_TOPIC", "BookCreated")

# Cognito: Users pools -> App integration -> App client information
AUTH_FLOW = os.environ.get("AUTH_FLOW", "ADMIN_USER_PASSWORD_AUTH")
CLIENT_ID = os.environ.get("CLIENT_ID", "")
USER_POOL_ID = os.environ.get("USER_POOL_ID", "")

VERIFY_TOKEN_SIGNATURE = os.environ.get("VERIFY_TOKEN_SIGNATURE", "false").lower() in ("1", "true", "yes")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

_client_config = Config(retries={"max_attempts": 3, "mode": "standard"})

_dynamodb = None
_sns = None
_cognito = None


def get_dynamodb() -> "DynamoDBServiceResource":
    """Get (or create) the DynamoDB service resource."""
    global _dynamodb
    if _dynamodb is None:
        _dynamodb = boto3.resource("dynamodb", region_name=REGION, config=_client_config)
    return _dynamodb


def get_sns_client() -> "SNSClient":
    """Get (or create) the SNS client."""
    global _sns
    if _sns is None:
        _sns = boto3.client("sns", region_name=REGION, config=_client_config)
    return _sns


def get_cognito_client() -> "CognitoIdentityProviderClient":
    """Get (or create) the Cognito Identity Provider client."""
    global _cognito
    if _cognito is None:
        _cognito = boto3.client("cognito-idp", region_name=REGION, config=_client_config)
    return _cognito


def get_books_table() -> "Table":
    return get_dynamodb().Table(BOOKS_TABLE_NAME)


def get_users_table() -> "Table":
    return get_dynamodb().Table(USERS_TABLE_NAME)


def book_created_topic_arn() -> str:
    """
    Build the BookCreated topic ARN.

    Read from the environment at call time so the Lambda configuration
    (REGION / ACCOUNT_ID) always wins over import-time values.
    """
    region = os.environ.get("REGION", REGION)
    account_id = os.environ.get("ACCOUNT_ID", "")
    return f"arn:aws:sns:{region}:{account_id}:{BOOK_CREATED_TOPIC}"


def cognito_issuer() -> str:
    """Issuer URL of the configured Cognito user pool."""
    return f"https://cognito-idp.{REGION}.amazonaws.com/{USER_POOL_ID}"
