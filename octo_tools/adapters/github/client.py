"""GitHub API client wrapper.

Centralized GitHub REST client with error mapping. One instance is shared by
every tool built for a registry; it holds a single ``httpx.AsyncClient`` and
performs no I/O until a method is awaited.
"""

from typing import Any

import httpx

from octo_obs.logging import get_logger

from .exceptions import (
    GitHubAPIError,
    GitHubAuthError,
    GitHubConflictError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubValidationError,
)

logger = get_logger(__name__)


class GitHubClientWrapper:
    """GitHub API client for Octo tools.

    Provides:
    - Authenticated JSON requests against the REST API
    - Error handling and exception mapping
    - Structured error messages

    Retries, rate limiting and pagination are left to GitHub and the caller.
    """

    BASE_URL = "https://api.github.com"
    API_VERSION = "2022-11-28"

    def __init__(
        self,
        token: str,
        base_url: str | None = None,
        timeout_seconds: int = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize GitHub client.

        Args:
            token: GitHub personal access token
            base_url: API root (GitHub Enterprise installs use their own)
            timeout_seconds: Request timeout
            transport: Optional httpx transport (tests use ``httpx.MockTransport``)
        """
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._get_headers(token),
            timeout=timeout_seconds,
            transport=transport,
        )

    def _get_headers(self, token: str) -> dict[str, str]:
        """Get request headers with authentication."""
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.API_VERSION,
        }

    async def aclose(self) -> None:
        """Release the underlying connection pool."""
        await self._http.aclose()

    async def __aenter__(self) -> "GitHubClientWrapper":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _handle_error(self, response: httpx.Response) -> None:
        """Map GitHub API errors to custom exceptions."""
        status = response.status_code

        try:
            error_data = response.json()
        except ValueError:
            error_data = None

        if isinstance(error_data, dict) and error_data.get("message") is not None:
            message = str(error_data["message"])
        else:
            message = response.text

        logger.warning(
            "github_api_error",
            method=response.request.method,
            path=response.request.url.path,
            status=status,
            message=message,
        )

        if status == 401:
            raise GitHubAuthError(f"Authentication failed: {message}")
        elif status in (403, 429):
            if status == 429 or "rate limit" in message.lower():
                raise GitHubRateLimitError(f"Rate limit exceeded: {message}", status)
            raise GitHubAuthError(f"Forbidden: {message}", status)
        elif status == 404:
            raise GitHubNotFoundError(f"Resource not found: {message}")
        elif status == 409:
            raise GitHubConflictError(f"Conflict: {message}")
        elif status == 422:
            raise GitHubValidationError(f"Validation failed: {message}")
        else:
            raise GitHubAPIError(f"GitHub API error ({status}): {message}", status)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body."""
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        if json:
            json = {k: v for k, v in json.items() if v is not None}

        response = await self._http.request(method, path, params=params or None, json=json)

        if response.status_code >= 400:
            self._handle_error(response)

        logger.debug("github_api_call", method=method, path=path, status=response.status_code)

        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    async def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        """Get repository details."""
        return await self._request("GET", f"/repos/{owner}/{repo}")

    async def list_branches(self, owner: str, repo: str, per_page: int = 30) -> list[dict[str, Any]]:
        """List repository branches."""
        return await self._request(
            "GET", f"/repos/{owner}/{repo}/branches", params={"per_page": per_page}
        )

    async def get_content(
        self, owner: str, repo: str, path: str, ref: str | None = None
    ) -> dict[str, Any] | list[dict[str, Any]]:
        """Get a file, directory listing, or other node at ``path``.

        Returns a list for directories and a dict for everything else.
        """
        return await self._request(
            "GET", f"/repos/{owner}/{repo}/contents/{path.lstrip('/')}", params={"ref": ref}
        )

    async def create_or_update_file(
        self,
        owner: str,
        repo: str,
        path: str,
        message: str,
        content_b64: str,
        branch: str | None = None,
        sha: str | None = None,
    ) -> dict[str, Any]:
        """Create a file, or update it when ``sha`` of the current blob is given.

        Args:
            content_b64: Base64-encoded file content
        """
        return await self._request(
            "PUT",
            f"/repos/{owner}/{repo}/contents/{path.lstrip('/')}",
            json={"message": message, "content": content_b64, "branch": branch, "sha": sha},
        )

    async def get_ref(self, owner: str, repo: str, ref: str) -> dict[str, Any]:
        """Resolve a ref such as ``heads/main`` to its object."""
        return await self._request("GET", f"/repos/{owner}/{repo}/git/ref/{ref}")

    async def create_ref(self, owner: str, repo: str, ref: str, sha: str) -> dict[str, Any]:
        """Create a fully-qualified ref (``refs/heads/<name>``) pointing at ``sha``."""
        return await self._request(
            "POST", f"/repos/{owner}/{repo}/git/refs", json={"ref": ref, "sha": sha}
        )

    async def create_fork(
        self,
        owner: str,
        repo: str,
        organization: str | None = None,
        name: str | None = None,
    ) -> dict[str, Any]:
        """Fork a repository to the authenticated user or an organization."""
        return await self._request(
            "POST",
            f"/repos/{owner}/{repo}/forks",
            json={"organization": organization, "name": name},
        )

    async def create_repository(
        self, payload: dict[str, Any], org: str | None = None
    ) -> dict[str, Any]:
        """Create a repository for the authenticated user, or in ``org``."""
        path = f"/orgs/{org}/repos" if org else "/user/repos"
        return await self._request("POST", path, json=payload)

    # ------------------------------------------------------------------
    # Pull requests
    # ------------------------------------------------------------------

    async def list_pull_requests(
        self, owner: str, repo: str, state: str = "open", per_page: int = 30
    ) -> list[dict[str, Any]]:
        """List pull requests."""
        return await self._request(
            "GET",
            f"/repos/{owner}/{repo}/pulls",
            params={"state": state, "per_page": per_page},
        )

    async def get_pull_request(self, owner: str, repo: str, pull_number: int) -> dict[str, Any]:
        """Get pull request details."""
        return await self._request("GET", f"/repos/{owner}/{repo}/pulls/{pull_number}")

    async def create_pull_request(
        self,
        owner: str,
        repo: str,
        title: str,
        head: str,
        base: str,
        body: str | None = None,
        draft: bool = False,
    ) -> dict[str, Any]:
        """Open a pull request from ``head`` into ``base``."""
        return await self._request(
            "POST",
            f"/repos/{owner}/{repo}/pulls",
            json={"title": title, "head": head, "base": base, "body": body, "draft": draft},
        )

    async def merge_pull_request(
        self,
        owner: str,
        repo: str,
        pull_number: int,
        commit_title: str | None = None,
        commit_message: str | None = None,
        merge_method: str = "merge",
    ) -> dict[str, Any]:
        """Merge a pull request."""
        return await self._request(
            "PUT",
            f"/repos/{owner}/{repo}/pulls/{pull_number}/merge",
            json={
                "commit_title": commit_title,
                "commit_message": commit_message,
                "merge_method": merge_method,
            },
        )

    # ------------------------------------------------------------------
    # Issues
    # ------------------------------------------------------------------

    async def list_issues(
        self,
        owner: str,
        repo: str,
        state: str = "open",
        labels: str | None = None,
        per_page: int = 30,
    ) -> list[dict[str, Any]]:
        """List issues (GitHub includes pull requests in this listing).

        Args:
            labels: Comma-separated label names
        """
        return await self._request(
            "GET",
            f"/repos/{owner}/{repo}/issues",
            params={"state": state, "labels": labels, "per_page": per_page},
        )

    async def get_issue(self, owner: str, repo: str, issue_number: int) -> dict[str, Any]:
        """Get issue details."""
        return await self._request("GET", f"/repos/{owner}/{repo}/issues/{issue_number}")

    async def create_issue(
        self,
        owner: str,
        repo: str,
        title: str,
        body: str | None = None,
        labels: list[str] | None = None,
        assignees: list[str] | None = None,
    ) -> dict[str, Any]:
        """Create a new issue."""
        return await self._request(
            "POST",
            f"/repos/{owner}/{repo}/issues",
            json={"title": title, "body": body, "labels": labels, "assignees": assignees},
        )

    async def update_issue(
        self, owner: str, repo: str, issue_number: int, **fields: Any
    ) -> dict[str, Any]:
        """Patch issue fields (state, state_reason, title, ...)."""
        return await self._request(
            "PATCH", f"/repos/{owner}/{repo}/issues/{issue_number}", json=fields
        )

    async def create_issue_comment(
        self, owner: str, repo: str, issue_number: int, body: str
    ) -> dict[str, Any]:
        """Add a comment to an issue or pull request."""
        return await self._request(
            "POST",
            f"/repos/{owner}/{repo}/issues/{issue_number}/comments",
            json={"body": body},
        )

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search_code(self, query: str, per_page: int = 10) -> dict[str, Any]:
        """Search code across GitHub."""
        return await self._request(
            "GET", "/search/code", params={"q": query, "per_page": per_page}
        )

    async def search_repositories(
        self,
        query: str,
        sort: str | None = None,
        order: str = "desc",
        per_page: int = 10,
    ) -> dict[str, Any]:
        """Search repositories."""
        return await self._request(
            "GET",
            "/search/repositories",
            params={"q": query, "sort": sort, "order": order, "per_page": per_page},
        )

    # ------------------------------------------------------------------
    # Commits
    # ------------------------------------------------------------------

    async def list_commits(
        self,
        owner: str,
        repo: str,
        sha: str | None = None,
        path: str | None = None,
        author: str | None = None,
        since: str | None = None,
        until: str | None = None,
        per_page: int = 30,
    ) -> list[dict[str, Any]]:
        """List commits, newest first."""
        return await self._request(
            "GET",
            f"/repos/{owner}/{repo}/commits",
            params={
                "sha": sha,
                "path": path,
                "author": author,
                "since": since,
                "until": until,
                "per_page": per_page,
            },
        )

    async def get_commit(self, owner: str, repo: str, ref: str) -> dict[str, Any]:
        """Get a single commit with stats and changed files."""
        return await self._request("GET", f"/repos/{owner}/{repo}/commits/{ref}")
