"""
Lambda handlers for authentication (login, post-confirmation registration hook)

The login handler exchanges credentials for Cognito tokens. The registration
hook is a Cognito trigger that mirrors a newly confirmed user into the user
table; it must hand the trigger event back unchanged for Cognito to proceed.
"""

from __future__ import annotations

import json
import logging
from typing import Any

# Support both Lambda deployment and local development
try:
    # Lambda deployment
    import config
    from utils.dynamodb import RecordStore
    from utils.identity import AuthenticationError, IdentityClient
    from utils.response import FAILURE_MESSAGE, api_response, error_response
    from utils.validation import parse_json_body
except ImportError:
    # Local development
    import library_backend.config as config
    from library_backend.utils.dynamodb import RecordStore
    from library_backend.utils.identity import AuthenticationError, IdentityClient
    from library_backend.utils.response import FAILURE_MESSAGE, api_response, error_response
    from library_backend.utils.validation import parse_json_body

logger = logging.getLogger()
logger.setLevel(config.LOG_LEVEL)

LOGIN_FAILED_MESSAGE = "Login failed"
REGISTRATION_FAILED_MESSAGE = "User registration failed"


class LoginHandler:
    """Handles POST /login with a {"username", "password"} body."""

    def __init__(self, identity: IdentityClient):
        self.identity = identity

    def __call__(self, event: dict, context: Any) -> dict:
        logger.info("login_handler invoked")

        body, error = parse_json_body(event)
        if error:
            return error_response(error.status_code, error.message)

        username = body.get("username")
        password = body.get("password")
        if not username or not password:
            return error_response(400, "username and password are required")

        try:
            tokens = self.identity.exchange_credentials(username, password)
        except AuthenticationError as e:
            # Provider detail stays in the logs, never in the response
            logger.warning(f"Error logging in user {username}: {str(e)}")
            return error_response(401, LOGIN_FAILED_MESSAGE)
        except Exception as e:
            logger.error(f"Unexpected error logging in user {username}: {str(e)}", exc_info=True)
            return error_response(500, FAILURE_MESSAGE)

        logger.info(f"User {username} logged in")
        return api_response(
            200,
            {
                "message": "Login successful",
                "AccessToken": tokens["AccessToken"],
                "IdToken": tokens["IdToken"],
            },
        )


class RegistrationHookHandler:
    """Cognito post-confirmation trigger writing {uuid: sub, email} to the user table."""

    def __init__(self, users: RecordStore):
        self.users = users

    def __call__(self, event: dict, context: Any) -> dict:
        logger.info("registration_hook_handler invoked")

        try:
            attributes = event["request"]["userAttributes"]
            user = {config.USER_KEY: attributes["sub"], "email": attributes["email"]}

            self.users.put(user)
            logger.info(f"Registered user {user[config.USER_KEY]}")

            return event

        except Exception as e:
            # Cognito cannot make sense of a raised error, so report and return
            logger.error(f"Error registering user: {str(e)}", exc_info=True)
            return {"statusCode": 500, "body": json.dumps({"message": REGISTRATION_FAILED_MESSAGE})}


_login_handler: LoginHandler | None = None
_registration_handler: RegistrationHookHandler | None = None


def _get_login_handler() -> LoginHandler:
    global _login_handler
    if _login_handler is None:
        _login_handler = LoginHandler(
            IdentityClient(
                config.get_cognito_client(),
                auth_flow=config.AUTH_FLOW,
                user_pool_id=config.USER_POOL_ID,
                client_id=config.CLIENT_ID,
            )
        )
    return _login_handler


def _get_registration_handler() -> RegistrationHookHandler:
    global _registration_handler
    if _registration_handler is None:
        _registration_handler = RegistrationHookHandler(
            RecordStore(config.get_users_table(), config.USER_KEY)
        )
    return _registration_handler


def login_handler(event, context):
    """Lambda entry point for login."""
    return _get_login_handler()(event, context)


def registration_hook_handler(event, context):
    """Lambda entry point for the Cognito post-confirmation trigger."""
    return _get_registration_handler()(event, context)
