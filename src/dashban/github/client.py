"""GitHub REST API client."""

from __future__ import annotations

import logging
import os
import subprocess
import time
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from ..services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.github.com"


class GitHubClientError(Exception):
    """Base exception for GitHub client errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubAuthError(GitHubClientError):
    """Authentication failed or no credential available."""

    pass


class GitHubNotFoundError(GitHubClientError):
    """Resource not found."""

    pass


class GitHubForbiddenError(GitHubClientError):
    """Permission denied."""

    pass


class GitHubRateLimitError(GitHubClientError):
    """Rate limit exceeded, or requests blocked until the budget resets."""

    pass


class GitHubValidationError(GitHubClientError):
    """The API rejected the payload (422)."""

    pass


def resolve_token() -> str | None:
    """Find a token from GITHUB_TOKEN or the gh CLI."""
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        logger.debug("Using token from GITHUB_TOKEN environment variable")
        return token

    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            check=True,
        )
        token = result.stdout.strip()
        if token:
            logger.debug("Using token from gh CLI")
            return token
    except (subprocess.CalledProcessError, FileNotFoundError):
        logger.debug("gh CLI not available or not authenticated")

    return None


class GitHubClient:
    """GitHub REST API client.

    Provides a thin wrapper around the REST API with:
    - Optional token authentication (public repositories load without one)
    - Enterprise support via custom base_url
    - Rate limit tracking: every response is fed to the RateLimiter, and
      requests are refused locally while the budget is exhausted
    """

    def __init__(
        self,
        token: str | None,
        base_url: str = DEFAULT_BASE_URL,
        rate_limiter: RateLimiter | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the GitHub client.

        Args:
            token: GitHub token, or None for unauthenticated (read-only) access
            base_url: API base URL (use custom for Enterprise)
            rate_limiter: Shared limiter that gates and observes requests
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.rate_limiter = rate_limiter
        headers = {"Accept": "application/vnd.github.v3+json"}
        if token:
            headers["Authorization"] = f"token {token}"
        self._client = httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=30.0,
            transport=transport,
        )
        if rate_limiter is not None:
            rate_limiter.authenticated = self.is_authenticated

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @classmethod
    def from_environment(
        cls,
        base_url: str = DEFAULT_BASE_URL,
        rate_limiter: RateLimiter | None = None,
    ) -> GitHubClient:
        """Create an authenticated client from GITHUB_TOKEN or the gh CLI.

        Raises:
            GitHubAuthError: If no token is available
        """
        token = resolve_token()
        if token:
            return cls(token, base_url, rate_limiter)

        logger.error("No GitHub token found")
        raise GitHubAuthError(
            "No GitHub token found. Either:\n"
            "  - Set GITHUB_TOKEN (or DASHBAN_GITHUB_TOKEN) environment variable\n"
            "  - Run 'gh auth login' to authenticate with GitHub CLI"
        )

    # --- Transport ---

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        guarded: bool = True,
    ) -> Any:
        """Send a request and return the decoded JSON body (None for 204).

        Args:
            method: HTTP method
            path: Path below base_url, e.g. "/repos/o/r/issues"
            params: Query parameters
            json: JSON body
            guarded: Refuse locally while the rate limiter is BLOCKED

        Raises:
            GitHubAuthError: Authentication failed
            GitHubNotFoundError: Resource not found
            GitHubForbiddenError: Permission denied
            GitHubRateLimitError: Rate limit exceeded or locally blocked
            GitHubValidationError: Payload rejected
            GitHubClientError: Other errors
        """
        response = self._send(method, path, params=params, json=json, guarded=guarded)
        return self._decode(method, path, response)

    def get_paginated(self, path: str, params: dict[str, Any] | None = None) -> list[Any]:
        """GET every page of a list endpoint by following Link rel="next"."""
        items: list[Any] = []
        url: str | None = path
        page_params: dict[str, Any] | None = {"per_page": 100, **(params or {})}
        while url:
            response = self._send("GET", url, params=page_params)
            page = self._decode("GET", url, response)
            if isinstance(page, list):
                items.extend(page)
            next_link = response.links.get("next")
            url = next_link.get("url") if next_link else None
            # The next URL already carries the query string
            page_params = None
        return items

    def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        guarded: bool = True,
    ) -> httpx.Response:
        if guarded and self.rate_limiter is not None and not self.rate_limiter.guard():
            logger.warning("%s %s refused: rate limited", method, path)
            raise GitHubRateLimitError("Rate limited - requests are temporarily blocked")

        logger.debug("%s %s: params=%s json=%s", method, path, params, json)

        start_time = time.monotonic()
        try:
            response = self._client.request(method, path, params=params, json=json)
        except httpx.RequestError as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            logger.error("%s %s failed after %.0fms: %s", method, path, elapsed_ms, e)
            raise GitHubClientError(f"Request failed: {e}") from e

        elapsed_ms = (time.monotonic() - start_time) * 1000

        exhausted = False
        if self.rate_limiter is not None:
            exhausted = self.rate_limiter.update_from_headers(
                response.status_code, response.headers
            )

        status = response.status_code
        if status == 401:
            logger.error("%s %s: 401 Unauthorized (%.0fms)", method, path, elapsed_ms)
            raise GitHubAuthError("Authentication failed. Check your GitHub token.", status)
        if status in (403, 429):
            if exhausted or status == 429 or "rate limit" in response.text.lower():
                logger.error("%s %s: %d Rate Limited (%.0fms)", method, path, status, elapsed_ms)
                if self.rate_limiter is not None and not exhausted:
                    self.rate_limiter.mark_exhausted()
                raise GitHubRateLimitError("GitHub API rate limit exceeded. Try again later.", status)
            logger.error("%s %s: 403 Forbidden (%.0fms)", method, path, elapsed_ms)
            raise GitHubForbiddenError(
                "Permission denied. Check that your token has the 'repo' scope "
                "and write access to the repository.",
                status,
            )
        if status == 404:
            logger.error("%s %s: 404 Not Found (%.0fms)", method, path, elapsed_ms)
            raise GitHubNotFoundError("Resource not found", status)
        if status == 422:
            logger.error("%s %s: 422 Unprocessable (%.0fms)", method, path, elapsed_ms)
            raise GitHubValidationError(
                f"GitHub API error: 422 - {_error_message(response)}", status
            )
        if status >= 400:
            logger.error("%s %s: HTTP %d (%.0fms)", method, path, status, elapsed_ms)
            raise GitHubClientError(
                f"GitHub API error: {status} - {_error_message(response)}", status
            )

        logger.info("%s %s: %d (%.0fms)", method, path, status, elapsed_ms)
        return response

    def _decode(self, method: str, path: str, response: httpx.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error("%s %s: Invalid JSON response", method, path)
            raise GitHubClientError(f"Invalid JSON response: {e}") from e

    # --- Endpoints ---

    def list_issues(self, owner: str, repo: str, state: str = "open") -> list[dict[str, Any]]:
        """List issues (pull requests excluded) in the given state."""
        items = self.get_paginated(f"/repos/{owner}/{repo}/issues", {"state": state})
        return [item for item in items if "pull_request" not in item]

    def get_issue(self, owner: str, repo: str, number: int) -> dict[str, Any]:
        return self.request("GET", f"/repos/{owner}/{repo}/issues/{number}")

    def create_issue(
        self, owner: str, repo: str, title: str, body: str = "", labels: list[str] | None = None
    ) -> dict[str, Any]:
        payload = {"title": title, "body": body, "labels": labels or []}
        return self.request("POST", f"/repos/{owner}/{repo}/issues", json=payload)

    def update_issue(self, owner: str, repo: str, number: int, **fields: Any) -> dict[str, Any]:
        """PATCH an issue (state, title, body)."""
        return self.request("PATCH", f"/repos/{owner}/{repo}/issues/{number}", json=fields)

    def get_issue_labels(self, owner: str, repo: str, number: int) -> list[str]:
        data = self.request("GET", f"/repos/{owner}/{repo}/issues/{number}/labels")
        return [label["name"] for label in data or []]

    def set_issue_labels(self, owner: str, repo: str, number: int, labels: list[str]) -> list[str]:
        """Replace the whole label set of an issue."""
        data = self.request(
            "PUT", f"/repos/{owner}/{repo}/issues/{number}/labels", json={"labels": labels}
        )
        return [label["name"] for label in data or []]

    def add_issue_labels(self, owner: str, repo: str, number: int, labels: list[str]) -> list[str]:
        data = self.request(
            "POST", f"/repos/{owner}/{repo}/issues/{number}/labels", json={"labels": labels}
        )
        return [label["name"] for label in data or []]

    def list_labels(self, owner: str, repo: str) -> list[dict[str, Any]]:
        return self.get_paginated(f"/repos/{owner}/{repo}/labels")

    def create_label(
        self, owner: str, repo: str, name: str, color: str, description: str = ""
    ) -> dict[str, Any]:
        payload = {"name": name, "color": color, "description": description}
        return self.request("POST", f"/repos/{owner}/{repo}/labels", json=payload)

    def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        return self.request("GET", f"/repos/{owner}/{repo}")

    def get_rate_limit(self) -> dict[str, Any]:
        """Return the ``resources.core`` block. Not gated: costs no budget."""
        data = self.request("GET", "/rate_limit", guarded=False)
        return data["resources"]["core"]


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json().get("message") or "Unknown error"
    except (ValueError, AttributeError):
        return response.text or "Unknown error"
