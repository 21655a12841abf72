"""
Authentication utilities for Library API

Provides functions to extract the caller's identity from the bearer token
sent in the Authorization header of API Gateway events.
"""

from __future__ import annotations

import logging

import jwt
from jwt import PyJWKClient, PyJWTError

logger = logging.getLogger()

_jwks_clients: dict[str, PyJWKClient] = {}


def get_bearer_token(event: dict) -> str | None:
    """
    Extract the token from an "Authorization: Bearer <token>" header.

    Args:
        event: API Gateway event

    Returns:
        str: The raw token, or None if the header is missing or malformed
    """
    headers = event.get("headers") or {}
    authorization = next(
        (value for name, value in headers.items() if name.lower() == "authorization"),
        None,
    )
    if not authorization:
        return None

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def _get_jwks_client(issuer: str) -> PyJWKClient:
    """One JWKS client per issuer, reused across invocations."""
    if issuer not in _jwks_clients:
        _jwks_clients[issuer] = PyJWKClient(f"{issuer}/.well-known/jwks.json")
    return _jwks_clients[issuer]


def decode_claims(token: str, verify: bool = False, issuer: str | None = None) -> dict:
    """
    Decode the claims of a Cognito JWT.

    Without verify the signature is NOT checked: the claims are only as
    trustworthy as whatever sits in front of the Lambda (e.g. an API Gateway
    Cognito authorizer).

    Args:
        token: Encoded JWT
        verify: Verify the RS256 signature against the pool JWKS and the issuer
        issuer: Cognito user pool issuer URL (required when verify is True)

    Returns:
        dict: Token claims

    Raises:
        jwt.PyJWTError: If the token cannot be decoded or fails verification
    """
    if not verify:
        return jwt.decode(token, options={"verify_signature": False})

    signing_key = _get_jwks_client(issuer).get_signing_key_from_jwt(token)
    # Cognito access tokens carry client_id instead of aud
    return jwt.decode(
        token,
        signing_key.key,
        algorithms=["RS256"],
        issuer=issuer,
        options={"verify_aud": False},
    )


def get_caller_id(event: dict, verify: bool = False, issuer: str | None = None) -> str | None:
    """
    Extract the caller's subject identifier (sub) from the bearer token.

    Args:
        event: API Gateway event
        verify: Verify the token signature before trusting it
        issuer: Cognito user pool issuer URL

    Returns:
        str: The caller's Cognito sub, or None if there is no usable token
    """
    token = get_bearer_token(event)
    if not token:
        return None

    try:
        claims = decode_claims(token, verify=verify, issuer=issuer)
    except PyJWTError as e:
        logger.warning(f"Rejected bearer token: {str(e)}")
        return None

    return claims.get("sub")
