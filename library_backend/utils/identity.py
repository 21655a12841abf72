"""
Cognito identity utilities for Library API

Wraps the user pool's admin auth flow: username/password in, token pair out.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from botocore.exceptions import BotoCoreError, ClientError

if TYPE_CHECKING:
    from mypy_boto3_cognito_idp.client import CognitoIdentityProviderClient

logger = logging.getLogger()


class AuthenticationError(Exception):
    """Raised when Cognito does not return tokens for the given credentials."""


class IdentityClient:
    """Exchanges credentials for Cognito tokens using AdminInitiateAuth."""

    def __init__(
        self,
        cognito_client: "CognitoIdentityProviderClient",
        auth_flow: str,
        user_pool_id: str,
        client_id: str,
    ):
        self.cognito_client = cognito_client
        self.auth_flow = auth_flow
        self.user_pool_id = user_pool_id
        self.client_id = client_id

    def exchange_credentials(self, username: str, password: str) -> dict[str, str]:
        """
        Authenticate a user against the pool.

        Args:
            username: Pool username (or alias such as email)
            password: User password

        Returns:
            dict: {"AccessToken": ..., "IdToken": ...}

        Raises:
            AuthenticationError: On invalid credentials, a pending challenge
                (e.g. NEW_PASSWORD_REQUIRED) or any Cognito error
        """
        try:
            response = self.cognito_client.admin_initiate_auth(
                AuthFlow=self.auth_flow,
                ClientId=self.client_id,
                UserPoolId=self.user_pool_id,
                AuthParameters={"USERNAME": username, "PASSWORD": password},
            )
        except (BotoCoreError, ClientError) as e:
            raise AuthenticationError(str(e)) from e

        result = response.get("AuthenticationResult")
        if not result:
            challenge = response.get("ChallengeName", "unknown")
            raise AuthenticationError(f"Authentication challenge not supported: {challenge}")

        access_token = result.get("AccessToken")
        id_token = result.get("IdToken")
        if not access_token or not id_token:
            raise AuthenticationError("Cognito response is missing tokens")

        return {"AccessToken": access_token, "IdToken": id_token}
