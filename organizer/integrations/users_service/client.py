"""
Users service client - HTTP adapter for the hosted identity provider.

Handles the OAuth redirect, code-for-session exchange, user lookup and
session revocation. No business logic - just I/O.
"""

import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class UsersServiceError(Exception):
    """Raised when the users service is unreachable or misbehaves."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UsersServiceClient:
    """
    Client for the external users/session service.

    Every request carries the ``x-api-key`` header. Session-bound calls
    also send the session token as a bearer token.
    """

    def __init__(self, api_url: str, api_key: str, timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            api_url: Base URL of the users service
            api_key: API key sent as x-api-key
            timeout: Per-request timeout in seconds
            session: Optional requests.Session (created if not provided)
        """
        if not api_url:
            raise UsersServiceError("USERS_SERVICE_API_URL is not configured")
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._session = session or requests.Session()

    def _request(self, method: str, path: str, session_token: Optional[str] = None,
                 **kwargs) -> requests.Response:
        headers = {"x-api-key": self.api_key}
        if session_token:
            headers["Authorization"] = f"Bearer {session_token}"

        url = f"{self.api_url}{path}"
        try:
            return self._session.request(
                method, url, headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.error(f"Users service {method} {path} failed: {e}")
            raise UsersServiceError(f"Users service unreachable: {e}") from e

    def _body(self, resp: requests.Response) -> Dict[str, Any]:
        if resp.status_code >= 400:
            raise UsersServiceError(
                f"Users service returned {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise UsersServiceError("Users service returned invalid JSON") from e
        if not isinstance(data, dict):
            raise UsersServiceError("Users service returned an unexpected payload")
        return data

    def _json(self, resp: requests.Response, key: str) -> Any:
        data = self._body(resp)
        if key not in data:
            raise UsersServiceError(f"Users service response missing '{key}'")
        return data[key]

    def get_oauth_redirect_url(self, provider: str = "google") -> str:
        """URL the browser should visit to start the OAuth flow."""
        resp = self._request("GET", f"/oauth/{provider}/redirect_url")
        return self._json(resp, "redirect_url")

    def exchange_code_for_session_token(self, code: str) -> str:
        """Trade an OAuth authorization code for a session token."""
        resp = self._request("POST", "/sessions", json={"code": code})
        return self._json(resp, "session_token")

    def get_current_user(self, session_token: str) -> Optional[Dict[str, Any]]:
        """
        Resolve a session token to its user.

        Returns:
            User dict, or None when the token is invalid or expired
        """
        resp = self._request("GET", "/users/me", session_token=session_token)
        if resp.status_code in (401, 403, 404):
            return None
        data = self._body(resp)
        # Some deployments wrap the user in a "data" envelope
        return data.get("data", data)

    def delete_session(self, session_token: str) -> None:
        """Revoke the session on the users service."""
        resp = self._request("DELETE", "/sessions/current", session_token=session_token)
        if resp.status_code >= 400 and resp.status_code not in (401, 404):
            raise UsersServiceError(
                f"Failed to delete session: {resp.status_code}",
                status_code=resp.status_code,
            )
