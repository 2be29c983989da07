"""Discovery of a repository's documentation pages."""

import posixpath
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

import yaml

from ofcatalog.github import GitHubError

__all__ = ["NavItem", "Document", "DocumentService"]

_INDEX_FILE = "mkdocs.yaml"
_INDEX_LOCATIONS = ("", "docs", "doc", ".of")
_README_FILES = (
    "docs/README.md",
    "README.md",
    "index.md",
    "readme.md",
    "docs/readme.md",
    "docs/index.md",
)
_README_TITLE = "README"


class _Loader(yaml.SafeLoader):
    """Safe loader that reads unknown tags as plain values."""


def _construct_any(loader: yaml.SafeLoader, suffix: str, node: yaml.Node) -> Any:
    if isinstance(node, yaml.ScalarNode):
        return loader.construct_scalar(node)
    if isinstance(node, yaml.SequenceNode):
        return loader.construct_sequence(node, deep=True)
    return loader.construct_mapping(node, deep=True)


_Loader.add_multi_constructor("", _construct_any)


def _scalar(value: Any, name: str) -> str:
    if value is None:
        return ""
    if isinstance(value, (Mapping, list)):
        raise ValueError(f"{name} must be a scalar, got {type(value).__name__}")
    return str(value)


@dataclass
class NavItem:
    """One entry of the navigation tree: a page or a section of pages."""

    title: str = ""
    file: str = ""
    children: list["NavItem"] = field(default_factory=list)

    @classmethod
    def from_yaml(cls, data: Any) -> "NavItem":
        """Build an item from a ``{title: file}`` or ``{title: [entries]}`` mapping."""
        item = cls()
        if isinstance(data, Mapping):
            for key, value in data.items():
                item.title = str(key)
                item._fill(value)
        return item

    def _fill(self, value: Any) -> None:
        if isinstance(value, str):
            self.file = value
        elif isinstance(value, list):
            for entry in value:
                if not isinstance(entry, Mapping):
                    raise ValueError(f"navigation entry must be a mapping, got {entry!r}")
                for key, sub_value in entry.items():
                    child = NavItem(title=str(key))
                    child._fill(sub_value)
                    self.children.append(child)


@dataclass
class Document:
    """The parts of an mkdocs configuration the catalog uses."""

    site_name: str = ""
    site_description: str = ""
    repo_url: str = ""
    nav: list[NavItem] = field(default_factory=list)
    plugins: list[str] = field(default_factory=list)

    @classmethod
    def from_yaml(cls, data: Mapping[str, Any]) -> "Document":
        """Build a document from a decoded mkdocs mapping."""
        nav = data.get("nav") or []
        plugins = data.get("plugins") or []
        if not isinstance(nav, list):
            raise ValueError("nav must be a list")
        if not isinstance(plugins, list):
            raise ValueError("plugins must be a list")
        return cls(
            site_name=_scalar(data.get("site_name"), "site_name"),
            site_description=_scalar(data.get("site_description"), "site_description"),
            repo_url=_scalar(data.get("repo_url"), "repo_url"),
            nav=[NavItem.from_yaml(entry) for entry in nav],
            plugins=[_scalar(plugin, "plugin") for plugin in plugins],
        )


class _GitHub(Protocol):
    def repo_url(self, repo: str) -> str: ...

    def get_repo_properties(self, repo: str) -> Mapping[str, str]: ...

    def get_file_content(self, repo: str, path: str) -> str: ...


class DocumentService:
    """Collects documentation links from mkdocs navigation and README files."""

    def __init__(self, github: _GitHub) -> None:
        self._github = github

    def get_documents(self, repo: str) -> dict[str, str]:
        """Return documentation titles mapped to their web addresses."""
        links: dict[str, str] = {}
        try:
            document, index_location = self._extract_data(repo)
        except (GitHubError, ValueError, yaml.YAMLError):
            document = None
        if document is not None:
            try:
                properties = self._github.get_repo_properties(repo)
            except GitHubError:
                properties = None
            if properties is not None:
                docs_path = posixpath.normpath(
                    posixpath.join(
                        "/", "blob", properties.get("DefaultBranch", ""), index_location, "docs"
                    )
                )
                self._process(document.nav, links, self._github.repo_url(repo) + docs_path, "")
        try:
            links.update(self._readme_documents(repo))
        except GitHubError:
            pass
        return links

    def _readme_documents(self, repo: str) -> dict[str, str]:
        repo_url = self._github.repo_url(repo)
        try:
            properties = self._github.get_repo_properties(repo)
        except GitHubError as exc:
            raise GitHubError(f"failed to get repo properties: {exc}") from exc
        branch = properties.get("DefaultBranch", "")
        links: dict[str, str] = {}
        for path in _README_FILES:
            try:
                self._github.get_file_content(repo, path)
            except GitHubError:
                continue
            links[_README_TITLE] = f"{repo_url}/blob/{branch}/{path}"
        return links

    def _extract_data(self, repo: str) -> tuple[Document, str]:
        content, location = self._remote_document(repo)
        merged: dict[str, Any] = {}
        for part in yaml.load_all(content, Loader=_Loader):
            if part is None:
                continue
            if not isinstance(part, Mapping):
                raise ValueError("mkdocs document must be a mapping")
            merged.update(part)
        return Document.from_yaml(merged), location

    def _remote_document(self, repo: str) -> tuple[str, str]:
        for folder in _INDEX_LOCATIONS:
            path = posixpath.join(folder, _INDEX_FILE) if folder else _INDEX_FILE
            try:
                return self._github.get_file_content(repo, path), folder
            except GitHubError:
                continue
        raise GitHubError("error getting file content from remote repository")

    def _process(
        self, items: list[NavItem], links: dict[str, str], docs_uri: str, parent: str
    ) -> None:
        for item in items:
            title = f"{parent}/{item.title}" if parent else item.title
            if item.children:
                self._process(item.children, links, docs_uri, title)
                continue
            links[title] = f"{docs_uri}/{item.file}"