# The MIT License (MIT)
# Copyright © 2025 Entrius
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

import bittensor as bt
import requests

from prgraph.constants import (
    BASE_GITHUB_API_URL,
    GITHUB_API_TIMEOUT_SECONDS,
    RATE_LIMIT_MIN_REMAINING,
)
from prgraph.utils.utils import mask_secret


@dataclass
class RateLimitInfo:
    """Represents GitHub API rate limit information extracted from response headers."""

    limit: int  # Maximum requests allowed per hour
    remaining: int  # Requests remaining in current window
    reset_timestamp: int  # Unix timestamp when the rate limit resets
    used: int  # Requests used in current window

    @property
    def is_exceeded(self) -> bool:
        return self.remaining == 0

    @property
    def seconds_until_reset(self) -> int:
        current_time = int(time.time())
        return max(0, self.reset_timestamp - current_time)

    def __str__(self) -> str:
        return f"RateLimit(remaining={self.remaining}/{self.limit}, resets_in={self.seconds_until_reset}s)"


class GitHubApiError(RuntimeError):
    """A GitHub REST call failed (transport error or non-2xx response)."""

    def __init__(self, message: str, *, status: int, url: str, rate_limit: Optional[RateLimitInfo] = None):
        super().__init__(message)
        self.status = status
        self.url = url
        self.rate_limit = rate_limit


class GitHubApi(Protocol):
    """What prgraph needs from a GitHub client."""

    def get_user(self, login: str) -> Dict[str, Any]: ...

    def get_content(self, owner: str, repo: str, path: str) -> Dict[str, Any]: ...


def parse_rate_limit_headers(response: requests.Response) -> Optional[RateLimitInfo]:
    """
    Parse GitHub API rate limit information from response headers.

    Args:
        response: The HTTP response from GitHub API

    Returns:
        RateLimitInfo object if headers are present, None otherwise
    """
    headers = response.headers

    try:
        limit = int(headers.get('X-RateLimit-Limit', 0))
        remaining = int(headers.get('X-RateLimit-Remaining', 0))
        reset_timestamp = int(headers.get('X-RateLimit-Reset', 0))
        used = int(headers.get('X-RateLimit-Used', 0))

        if limit == 0 and reset_timestamp == 0:
            return None

        return RateLimitInfo(limit=limit, remaining=remaining, reset_timestamp=reset_timestamp, used=used)
    except (ValueError, TypeError) as e:
        bt.logging.debug(f"Could not parse rate limit headers: {e}")
        return None


def check_preemptive_rate_limit(rate_limit_info: Optional[RateLimitInfo]) -> None:
    """Log a warning when we are close to exhausting the GitHub rate limit."""
    if not rate_limit_info:
        return

    if rate_limit_info.remaining <= RATE_LIMIT_MIN_REMAINING:
        bt.logging.warning(
            f"Approaching GitHub API rate limit: {rate_limit_info.remaining} requests remaining, "
            f"resets in {rate_limit_info.seconds_until_reset}s"
        )
    elif rate_limit_info.remaining <= rate_limit_info.limit * 0.1:
        bt.logging.info(
            f"GitHub API rate limit status: {rate_limit_info.remaining}/{rate_limit_info.limit} remaining"
        )


def make_headers(token: Optional[str]) -> Dict[str, str]:
    """Build standard GitHub HTTP headers, with token auth when a PAT is given.

    Args:
        token (Optional[str]): Github pat, or None for anonymous requests
    Returns:
        Dict[str, str]: Mapping of HTTP header names to values.
    """
    headers = {"Accept": "application/vnd.github.v3+json"}
    if token:
        headers["Authorization"] = f"token {token}"
    return headers


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = {}
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return f"GitHub API request failed ({response.status_code})"


class GitHubClient:
    """Minimal GitHub REST client covering users, repository contents and pull requests.

    Every call is a single request. Failures raise GitHubApiError and are never retried;
    callers decide what a failure means for them.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = BASE_GITHUB_API_URL,
        timeout: float = GITHUB_API_TIMEOUT_SECONDS,
    ):
        self.token = token
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.last_rate_limit: Optional[RateLimitInfo] = None

    def __repr__(self) -> str:
        token = mask_secret(self.token) if self.token else None
        return f"GitHubClient(base_url={self.base_url!r}, token={token})"

    def request_json(self, path: str) -> Any:
        url = f"{self.base_url}{path}"
        bt.logging.debug(f"GitHub API GET {url}")

        try:
            response = requests.get(url, headers=make_headers(self.token), timeout=self.timeout)
        except requests.RequestException as e:
            bt.logging.warning(f"GitHub API request to {url} failed: {e}")
            raise GitHubApiError(str(e), status=0, url=url, rate_limit=self.last_rate_limit) from e

        rate_limit = parse_rate_limit_headers(response)
        if rate_limit is not None:
            self.last_rate_limit = rate_limit

        if response.status_code != 200:
            message = _error_message(response)
            bt.logging.warning(f"GitHub API request to {url} failed with status {response.status_code}: {message}")
            raise GitHubApiError(message, status=response.status_code, url=url, rate_limit=rate_limit)

        check_preemptive_rate_limit(rate_limit)

        try:
            return response.json()
        except ValueError as e:
            raise GitHubApiError(
                f"GitHub API returned invalid JSON: {e}", status=response.status_code, url=url, rate_limit=rate_limit
            ) from e

    def get_user(self, login: str) -> Dict[str, Any]:
        """Fetch the public profile for a GitHub login."""
        return self.request_json(f"/users/{login}")

    def get_content(self, owner: str, repo: str, path: str) -> Dict[str, Any]:
        """Fetch a file from a repository. The file body is base64 in the `content` field."""
        return self.request_json(f"/repos/{owner}/{repo}/contents/{path}")

    def get_pull_request(self, repository: str, number: int) -> Dict[str, Any]:
        """Fetch a pull request by repository ('owner/repo') and number."""
        return self.request_json(f"/repos/{repository}/pulls/{number}")
