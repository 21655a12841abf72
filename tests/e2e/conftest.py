"""
Pytest configuration for E2E tests against a deployed API stage.
"""

import os

import pytest
import requests


@pytest.fixture(scope="session")
def api_url():
    """API URL for the backend (e.g. https://<id>.execute-api.<region>.amazonaws.com/Prod)."""
    url = os.getenv("API_URL")
    if not url:
        pytest.skip("API URL not provided. Set the API_URL environment variable.")
    return url.rstrip("/")


@pytest.fixture(scope="session")
def test_credentials():
    """Test user credentials from environment variables."""
    username = os.getenv("TEST_USER_EMAIL")
    password = os.getenv("TEST_USER_PASSWORD")

    if not username or not password:
        pytest.skip("Test credentials not provided. Set TEST_USER_EMAIL and TEST_USER_PASSWORD environment variables.")

    return {"username": username, "password": password}


@pytest.fixture(scope="session")
def session():
    with requests.Session() as http:
        http.headers.update({"Content-Type": "application/json"})
        yield http


@pytest.fixture(scope="session")
def tokens(api_url, session, test_credentials):
    """Log in once per session and return the Cognito token pair."""
    response = session.post(f"{api_url}/login", json=test_credentials, timeout=10)
    response.raise_for_status()
    return response.json()


@pytest.fixture
def auth_headers(tokens):
    return {"Authorization": f"Bearer {tokens['IdToken']}"}
