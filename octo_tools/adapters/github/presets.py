"""GitHub tool names and presets.

``ToolName`` is the closed set of tools the composer builds. Presets are
hand-curated subsets of it for scoping an agent to one use case.
"""

from collections.abc import Iterable
from enum import Enum


class ToolName(str, Enum):
    """Names of the tools returned by ``create_github_tools``."""

    GET_REPOSITORY = "getRepository"
    LIST_BRANCHES = "listBranches"
    GET_FILE_CONTENT = "getFileContent"
    LIST_PULL_REQUESTS = "listPullRequests"
    GET_PULL_REQUEST = "getPullRequest"
    LIST_ISSUES = "listIssues"
    GET_ISSUE = "getIssue"
    SEARCH_CODE = "searchCode"
    SEARCH_REPOSITORIES = "searchRepositories"
    LIST_COMMITS = "listCommits"
    GET_COMMIT = "getCommit"
    CREATE_OR_UPDATE_FILE = "createOrUpdateFile"
    CREATE_PULL_REQUEST = "createPullRequest"
    MERGE_PULL_REQUEST = "mergePullRequest"
    ADD_PULL_REQUEST_COMMENT = "addPullRequestComment"
    CREATE_ISSUE = "createIssue"
    ADD_ISSUE_COMMENT = "addIssueComment"
    CLOSE_ISSUE = "closeIssue"


ALL_TOOL_NAMES: frozenset[ToolName] = frozenset(ToolName)

# Tools that change remote state and therefore carry an approval flag.
WRITE_TOOL_NAMES: frozenset[ToolName] = frozenset(
    {
        ToolName.CREATE_OR_UPDATE_FILE,
        ToolName.CREATE_PULL_REQUEST,
        ToolName.MERGE_PULL_REQUEST,
        ToolName.ADD_PULL_REQUEST_COMMENT,
        ToolName.CREATE_ISSUE,
        ToolName.ADD_ISSUE_COMMENT,
        ToolName.CLOSE_ISSUE,
    }
)


class ToolPreset(str, Enum):
    """Predefined tool sets.

    - code-review: read PRs, file content and commits, and post PR comments
    - issue-triage: read/create/close issues, search, and comment
    - repo-explorer: read-only access to repos, branches, code and search
    - maintainer: everything
    """

    CODE_REVIEW = "code-review"
    ISSUE_TRIAGE = "issue-triage"
    REPO_EXPLORER = "repo-explorer"
    MAINTAINER = "maintainer"


class UnknownPresetError(ValueError):
    """Preset identifier is not one of ``ToolPreset``."""


PRESET_TOOLS: dict[ToolPreset, frozenset[ToolName]] = {
    ToolPreset.CODE_REVIEW: frozenset(
        {
            ToolName.GET_PULL_REQUEST,
            ToolName.LIST_PULL_REQUESTS,
            ToolName.GET_FILE_CONTENT,
            ToolName.LIST_COMMITS,
            ToolName.GET_COMMIT,
            ToolName.GET_REPOSITORY,
            ToolName.LIST_BRANCHES,
            ToolName.SEARCH_CODE,
            ToolName.ADD_PULL_REQUEST_COMMENT,
        }
    ),
    ToolPreset.ISSUE_TRIAGE: frozenset(
        {
            ToolName.LIST_ISSUES,
            ToolName.GET_ISSUE,
            ToolName.CREATE_ISSUE,
            ToolName.ADD_ISSUE_COMMENT,
            ToolName.CLOSE_ISSUE,
            ToolName.GET_REPOSITORY,
            ToolName.SEARCH_REPOSITORIES,
            ToolName.SEARCH_CODE,
        }
    ),
    ToolPreset.REPO_EXPLORER: frozenset(
        {
            ToolName.GET_REPOSITORY,
            ToolName.LIST_BRANCHES,
            ToolName.GET_FILE_CONTENT,
            ToolName.LIST_PULL_REQUESTS,
            ToolName.GET_PULL_REQUEST,
            ToolName.LIST_ISSUES,
            ToolName.GET_ISSUE,
            ToolName.LIST_COMMITS,
            ToolName.GET_COMMIT,
            ToolName.SEARCH_CODE,
            ToolName.SEARCH_REPOSITORIES,
        }
    ),
    ToolPreset.MAINTAINER: ALL_TOOL_NAMES,
}


def _validate_preset_table() -> None:
    missing = set(ToolPreset) - set(PRESET_TOOLS)
    if missing:
        raise RuntimeError(f"Presets without a tool table: {sorted(p.value for p in missing)}")
    for preset, tools in PRESET_TOOLS.items():
        unknown = tools - ALL_TOOL_NAMES
        if unknown:
            raise RuntimeError(f"Preset {preset.value!r} names unknown tools: {sorted(unknown)}")


_validate_preset_table()


def parse_preset(value: "str | ToolPreset") -> ToolPreset:
    """Parse a preset identifier.

    Raises:
        UnknownPresetError: value is not a known preset
    """
    try:
        return ToolPreset(value)
    except ValueError:
        known = ", ".join(p.value for p in ToolPreset)
        raise UnknownPresetError(f"Unknown tool preset {value!r} (known: {known})") from None


def resolve_preset_tools(
    preset: "str | ToolPreset | Iterable[str | ToolPreset] | None",
) -> frozenset[ToolName] | None:
    """Union of the tool sets of one or more presets.

    Returns ``None`` when no preset is given, meaning "do not filter".
    An empty iterable resolves to an empty set.

    Raises:
        UnknownPresetError: any identifier is not a known preset
    """
    if preset is None:
        return None

    if isinstance(preset, str):
        presets = [preset]
    else:
        presets = list(preset)

    tools: set[ToolName] = set()
    for value in presets:
        tools |= PRESET_TOOLS[parse_preset(value)]
    return frozenset(tools)
