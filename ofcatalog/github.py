"""Read-only access to repositories of the organisation on GitHub."""

import base64
import binascii
from collections.abc import Mapping
from typing import Any, Protocol

__all__ = ["GitHubError", "GitHubNotFoundError", "GitHubService"]

_DEFAULT_OWNER = "motain"


class GitHubError(RuntimeError):
    """Raised when a GitHub request fails."""


class GitHubNotFoundError(GitHubError):
    """Raised when the requested repository, file or folder does not exist."""


class _GitHubClient(Protocol):
    """Low-level GitHub access; raises GitHubNotFoundError on 404 and GitHubError otherwise."""

    def get_repository(self, owner: str, repo: str) -> Mapping[str, Any]: ...

    def get_contents(
        self, owner: str, repo: str, path: str
    ) -> Mapping[str, Any] | list[Mapping[str, Any]]: ...

    def search_code(self, repo: str, query: str) -> list[str]: ...


def _decode_content(content: Mapping[str, Any]) -> str:
    encoding = content.get("encoding") or ""
    raw = content.get("content") or ""
    if encoding == "base64":
        try:
            return base64.b64decode(raw).decode("utf-8", errors="replace")
        except (binascii.Error, ValueError) as exc:
            raise GitHubError(f"failed to decode file content: {exc}") from exc
    if encoding == "":
        return raw
    if encoding == "none":
        raise GitHubError(
            "failed to decode file content: unsupported content encoding: none, "
            "this may occur when file size > 1 MB"
        )
    raise GitHubError(f"failed to decode file content: unsupported content encoding: {encoding}")


class GitHubService:
    """Repository queries scoped to one owner."""

    def __init__(self, client: _GitHubClient, owner: str = _DEFAULT_OWNER) -> None:
        self._client = client
        self._owner = owner

    def repo_url(self, repo: str) -> str:
        """The web address of ``repo``."""
        return f"https://github.com/{self._owner}/{repo}"

    def get_repo(self, repo: str) -> Mapping[str, Any]:
        """Return the repository details."""
        try:
            return self._client.get_repository(self._owner, repo)
        except GitHubNotFoundError as exc:
            raise GitHubNotFoundError(f"failed to fetch repo: {exc}") from exc
        except GitHubError as exc:
            raise GitHubError(f"failed to fetch repo: {exc}") from exc

    def file_exists(self, repo: str, path: str) -> bool:
        """True when ``path`` is a file in ``repo``; False when missing or a folder."""
        try:
            content = self._client.get_contents(self._owner, repo, path)
        except GitHubNotFoundError:
            return False
        except GitHubError as exc:
            raise GitHubError(f"failed to fetch file: {exc}") from exc
        return isinstance(content, Mapping)

    def get_file_content(self, repo: str, path: str) -> str:
        """Return the decoded text of the file at ``path``."""
        try:
            content = self._client.get_contents(self._owner, repo, path)
        except GitHubNotFoundError as exc:
            raise GitHubNotFoundError(f"failed to fetch file: {exc}") from exc
        except GitHubError as exc:
            raise GitHubError(f"failed to fetch file: {exc}") from exc
        if not isinstance(content, Mapping):
            raise GitHubError(f"failed to decode file content: {path} is a directory")
        return _decode_content(content)

    def get_repo_properties(self, repo: str) -> dict[str, str]:
        """Return name, description, default branch, visibility, open issues and licence."""
        details = self._client.get_repository(self._owner, repo)
        licence = details.get("license")
        return {
            "Name": details.get("name") or "",
            "Description": details.get("description") or "",
            "DefaultBranch": details.get("default_branch") or "",
            "Visibility": details.get("visibility") or "",
            "OpenIssues": str(int(details.get("open_issues_count") or 0)),
            "License": (licence.get("name") or "") if licence else "",
        }

    def get_repo_description(self, repo: str) -> str:
        """Return the repository description; an empty one is an error."""
        try:
            details = self._client.get_repository(self._owner, repo)
        except GitHubError as exc:
            raise GitHubError(f"failed to fetch repo description: {exc}") from exc
        description = details.get("description") or ""
        if not description:
            raise GitHubError(f"repository {repo} has no description")
        return description

    def search(self, repo: str, query: str) -> list[str]:
        """Return the paths of files in ``repo`` matching the code search ``query``."""
        return self._client.search_code(f"{self._owner}/{repo}", query)