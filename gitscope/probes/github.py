import os
import asyncio
import logging
import httpx
from datetime import date
from urllib.parse import quote
from typing import Any, Callable, Dict, List, Optional
from pydantic import ValidationError
from gitscope.models.github import ActivitySeries, GithubSnapshot, Profile, Repository
from gitscope.probes.activity import build_series, count_events_by_date, empty_series, utc_today
from gitscope.probes.errors import AuthError, GithubProbeError, MalformedResponse, NotFound, UpstreamError

logger = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
GITHUB_MEDIA_TYPE = "application/vnd.github.v3+json"

# Single page only; nothing here follows Link headers.
PAGE_SIZE = 100

# InvalidURL is not an HTTPError; both mean the request never got an answer.
REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL)

TOKEN_HINT = (
    " This usually means the provided GITHUB_TOKEN is invalid, expired, or lacks the necessary {scope} scope."
    " Please verify your token and its permissions on GitHub."
)
ANONYMOUS_HINT = (
    " This may be due to GitHub API rate limits or lack of authentication."
    " Please set a GITHUB_TOKEN to increase the limit and authenticate requests."
)


class GithubProbe:
    """
    Read-only client for the three GitHub REST endpoints the dashboard needs.

    The token is resolved once here; every error message built later branches
    on `self.authenticated` rather than re-reading the environment.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = GITHUB_API_BASE,
        timeout: Optional[float] = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], date] = utc_today,
    ):
        """
        Every request is bounded by `timeout` seconds (15 by default); pass
        None to leave cancellation entirely to the caller. `transport` and
        `clock` replace the network and "today" respectively.
        """
        self.token = (token or os.getenv("GITHUB_TOKEN") or "").strip() or None
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.clock = clock
        self.headers = {
            "Accept": GITHUB_MEDIA_TYPE,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
            "User-Agent": "gitscope",
        }
        if self.token:
            self.headers["Authorization"] = f"Bearer {self.token}"

    @property
    def authenticated(self) -> bool:
        return self.token is not None

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            transport=self.transport,
        ) as client:
            return await client.get(path, params=params)

    def _auth_error(self, what: str, username: str, response: httpx.Response, scope: str) -> AuthError:
        message = f"Failed to fetch {what} for {username}: {response.status_code} {_status_text(response)}."
        message += TOKEN_HINT.format(scope=scope) if self.authenticated else ANONYMOUS_HINT
        return AuthError(message, response.status_code)

    def _upstream_error(self, what: str, username: str, response: httpx.Response) -> UpstreamError:
        status_text = _status_text(response)
        return UpstreamError(
            f"Failed to fetch {what} for {username}: {response.status_code} {status_text}",
            status_code=response.status_code,
            status_text=status_text,
        )

    async def fetch_profile(self, username: str) -> Profile:
        try:
            response = await self._get(_user_path(username))
        except REQUEST_ERRORS as e:
            raise UpstreamError(f"Failed to fetch GitHub profile for {username}: {e}") from e

        if response.status_code == 404:
            raise NotFound(username)
        if response.status_code in (401, 403):
            raise self._auth_error("GitHub profile", username, response, "'user'")
        if not response.is_success:
            raise self._upstream_error("GitHub profile", username, response)

        try:
            payload = response.json()
            if not isinstance(payload, dict):
                raise ValueError(f"expected an object, got {type(payload).__name__}")
            return Profile.from_api(payload)
        except (ValueError, KeyError, ValidationError) as e:
            raise MalformedResponse(
                f"Unexpected GitHub profile payload for {username}: {e}",
                status_code=response.status_code,
            ) from e

    async def fetch_repositories(self, username: str) -> List[Repository]:
        try:
            response = await self._get(
                _user_path(username, "repos"),
                params={"type": "owner", "sort": "updated", "per_page": PAGE_SIZE},
            )
        except REQUEST_ERRORS as e:
            raise UpstreamError(f"Failed to fetch GitHub repositories for {username}: {e}") from e

        if response.status_code == 404 and self.authenticated:
            logger.warning(
                'GitHub repositories not found for user "%s" or none accessible. Returning empty list.', username
            )
            return []
        if response.status_code in (401, 403):
            raise self._auth_error("GitHub repositories", username, response, "'public_repo' or 'repo'")
        if not response.is_success:
            raise self._upstream_error("GitHub repositories", username, response)

        try:
            payload = response.json()
        except ValueError:
            logger.warning("Repository payload for %s is not valid JSON. Returning empty list.", username)
            return []
        if not isinstance(payload, list):
            logger.warning(
                "Expected an array of repositories for %s, received %s. Returning empty list.",
                username, type(payload).__name__,
            )
            return []

        repositories = []
        for item in payload[:PAGE_SIZE]:
            if not isinstance(item, dict):
                logger.warning("Skipping non-object repository entry for %s", username)
                continue
            try:
                repositories.append(Repository.from_api(item))
            except (KeyError, ValidationError) as e:
                logger.warning("Skipping malformed repository entry for %s: %s", username, e)
        return repositories

    async def fetch_activity(self, username: str) -> ActivitySeries:
        today = self.clock()
        try:
            response = await self._get(_user_path(username, "events/public"), params={"per_page": PAGE_SIZE})
        except REQUEST_ERRORS as e:
            logger.warning("Could not fetch public events for %s: %s. Returning empty activity.", username, e)
            return empty_series(today)

        if not response.is_success:
            logger.warning(
                "Could not fetch public events for %s: %s %s. Returning empty activity.",
                username, response.status_code, _status_text(response),
            )
            return empty_series(today)

        try:
            events = response.json()
        except ValueError:
            logger.warning("Public events payload for %s is not valid JSON. Returning empty activity.", username)
            return empty_series(today)
        if not isinstance(events, list):
            logger.warning("Expected an array of events for %s. Returning empty activity.", username)
            return empty_series(today)

        return build_series(count_events_by_date(events[:PAGE_SIZE]), today)

    async def fetch_snapshot(self, username: str) -> GithubSnapshot:
        """
        Fans out to all three fetchers at once. Only a profile failure aborts;
        a repository failure leaves an empty list and a message behind.
        """
        profile, repositories, activity = await asyncio.gather(
            self.fetch_profile(username),
            self.fetch_repositories(username),
            self.fetch_activity(username),
            return_exceptions=True,
        )
        if isinstance(profile, BaseException):
            raise profile

        repository_error = None
        if isinstance(repositories, GithubProbeError):
            logger.warning("Repositories unavailable for %s: %s", username, repositories)
            repository_error = str(repositories)
            repositories = []
        elif isinstance(repositories, BaseException):
            raise repositories
        if isinstance(activity, BaseException):
            raise activity

        return GithubSnapshot(
            profile=profile,
            repositories=repositories,
            activity=activity,
            repository_error=repository_error,
        )


def _status_text(response: httpx.Response) -> str:
    return response.reason_phrase or "No status text"


def _user_path(username: str, suffix: str = "") -> str:
    # The username is a single path segment; "/", "?" and "#" must not split it.
    path = f"/users/{quote(username, safe='')}"
    return f"{path}/{suffix}" if suffix else path
