"""GitHub search tools."""

from typing import Any

from octo_tools.adapters.github.schemas import (
    CodeSearchItem,
    RepositorySearchItem,
    SearchCodeInput,
    SearchCodeOutput,
    SearchRepositoriesInput,
    SearchRepositoriesOutput,
)

from .base import GitHubTool


class SearchCodeTool(GitHubTool):
    """Tool for GitHub code search.

    Use Cases:
    - "Where is parse_config defined in octo/demo?"
    - "Find Python files importing httpx"
    """

    name = "searchCode"
    description = (
        "Search for code across GitHub repositories using GitHub code search syntax "
        "(qualifiers such as repo:, language:, path:)"
    )
    input_model = SearchCodeInput

    async def execute(self, ctx: dict[str, Any], input_data: dict[str, Any]) -> dict[str, Any]:
        """Execute code search.

        Args:
            ctx: Execution context (chat_id, model, etc.)
            input_data: Tool input matching SearchCodeInput schema

        Returns:
            Total count and matches matching SearchCodeOutput schema

        Raises:
            GitHubValidationError: Query GitHub cannot parse
            GitHubRateLimitError: Search rate limit reached
        """
        args = self.parse_input(input_data)
        data = await self.client.search_code(args.query, per_page=args.per_page)

        return SearchCodeOutput(
            total_count=data.get("total_count", 0),
            items=[
                CodeSearchItem(
                    name=item["name"],
                    path=item["path"],
                    url=item["html_url"],
                    repository=item["repository"]["full_name"],
                )
                for item in data.get("items", [])
            ],
        ).model_dump()


class SearchRepositoriesTool(GitHubTool):
    """Tool for repository search, sortable by stars, forks or recent updates."""

    name = "searchRepositories"
    description = "Search GitHub repositories by keywords, topics, language, or stars"
    input_model = SearchRepositoriesInput

    async def execute(self, ctx: dict[str, Any], input_data: dict[str, Any]) -> dict[str, Any]:
        args = self.parse_input(input_data)
        data = await self.client.search_repositories(
            args.query, sort=args.sort, order=args.order, per_page=args.per_page
        )

        return SearchRepositoriesOutput(
            total_count=data.get("total_count", 0),
            items=[
                RepositorySearchItem(
                    name=repo["name"],
                    full_name=repo["full_name"],
                    description=repo.get("description"),
                    url=repo["html_url"],
                    stars=repo.get("stargazers_count", 0),
                    language=repo.get("language"),
                    updated_at=repo["updated_at"],
                )
                for repo in data.get("items", [])
            ],
        ).model_dump()
