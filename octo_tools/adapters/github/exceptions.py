"""GitHub adapter exceptions.

Custom exception hierarchy for GitHub API errors.
"""


class GitHubAPIError(Exception):
    """Base exception for GitHub adapter."""

    status_code: int | None = None

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class GitHubAuthError(GitHubAPIError):
    """Invalid API token or insufficient permissions."""

    status_code = 401


class GitHubNotFoundError(GitHubAPIError):
    """Repository, issue, or PR not found (404 response)."""

    status_code = 404


class GitHubRateLimitError(GitHubAPIError):
    """Rate limit exceeded (403/429 with rate limit wording)."""

    status_code = 429


class GitHubConflictError(GitHubAPIError):
    """Remote state conflict, e.g. a stale file SHA or an unmergeable PR (409)."""

    status_code = 409


class GitHubValidationError(GitHubAPIError):
    """Request rejected by GitHub as unprocessable (422)."""

    status_code = 422
