"""Lookup of squad ownership data from the organisation's group definitions."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

__all__ = [
    "Link",
    "GroupMetadata",
    "GroupSpec",
    "Group",
    "Owner",
    "SquadDetails",
    "SquadNotFoundError",
    "OwnerService",
    "load_squads_from_yaml",
    "find_vendored_org_file",
]

_log = logging.getLogger(__name__)

_ORG_FILE = Path("vendor/github.com/motain/of-org/main.yaml")


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass
class Link:
    title: str = ""
    url: str = ""
    icon: str = ""
    type: str = ""


@dataclass
class GroupMetadata:
    name: str = ""
    description: str = ""
    annotations: dict[str, str] = field(default_factory=dict)
    links: list[Link] = field(default_factory=list)


@dataclass
class GroupSpec:
    type: str = ""
    parent: str = ""
    children: list[str] = field(default_factory=list)
    display_name: str = ""


@dataclass
class Group:
    """A group entity of the organisation (squad, tribe or area)."""

    api_version: str = ""
    kind: str = ""
    metadata: GroupMetadata = field(default_factory=GroupMetadata)
    spec: GroupSpec = field(default_factory=GroupSpec)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Group":
        """Build a group from its decoded YAML mapping."""
        metadata = data.get("metadata") or {}
        spec = data.get("spec") or {}
        profile = spec.get("profile") or {}
        links = [
            Link(
                title=_text(link.get("title")),
                url=_text(link.get("url")),
                icon=_text(link.get("icon")),
                type=_text(link.get("type")),
            )
            for link in metadata.get("links") or []
        ]
        annotations = {
            str(key): _text(value)
            for key, value in (metadata.get("annotations") or {}).items()
        }
        return cls(
            api_version=_text(data.get("apiVersion")),
            kind=_text(data.get("kind")),
            metadata=GroupMetadata(
                name=_text(metadata.get("name")),
                description=_text(metadata.get("description")),
                annotations=annotations,
                links=links,
            ),
            spec=GroupSpec(
                type=_text(spec.get("type")),
                parent=_text(spec.get("parent")),
                children=[_text(child) for child in spec.get("children") or []],
                display_name=_text(profile.get("displayName")),
            ),
        )


@dataclass
class Owner:
    """Ownership information attached to a component."""

    owner_id: str = ""
    slack_channels: dict[str, str] | None = None
    projects: dict[str, str] | None = None
    display_name: str = ""


@dataclass
class SquadDetails:
    jira_team_id: str = ""
    slack_url: str = ""
    slack_title: str = ""
    jira_project_url: str = ""
    jira_project_name: str = ""
    tribe: str = ""


class SquadNotFoundError(LookupError):
    """Raised when a squad is not among the known squads."""


def load_squads_from_yaml(path: str | os.PathLike) -> dict[str, Group]:
    """Read a multi-document YAML file and return its squads by name.

    Reading stops at the first document that cannot be decoded.
    """
    _log.info("Loading squads from: %s", path)
    text = Path(path).read_text()
    squads: dict[str, Group] = {}
    documents = yaml.safe_load_all(text)
    while True:
        try:
            document = next(documents)
        except (StopIteration, yaml.YAMLError):
            break
        if document is None:
            continue
        if not isinstance(document, Mapping):
            break
        try:
            group = Group.from_dict(document)
        except (AttributeError, TypeError):
            break
        if group.spec.type == "squad":
            squads[group.metadata.name] = group
    return squads


def find_vendored_org_file(start: str | os.PathLike | None = None) -> Path:
    """Locate the vendored organisation file from ``start`` (default: cwd)."""
    base = (Path.cwd() if start is None else Path(start)).resolve()
    for directory in (base, base.parent, base.parent.parent):
        candidate = directory / _ORG_FILE
        if candidate.exists():
            return candidate
    for directory in (base, *base.parents):
        if (directory / "go.mod").exists():
            candidate = directory / _ORG_FILE
            if candidate.exists():
                return candidate
            break
    raise FileNotFoundError("could not find main.yaml in any expected location")


class OwnerService:
    """Answers which squad owns what, from a set of squad groups."""

    def __init__(self, squads: Mapping[str, Group] | None = None) -> None:
        self._squads = dict(squads or {})

    @classmethod
    def from_default_location(cls) -> "OwnerService":
        """Load squads from the vendored organisation file; empty if not found."""
        try:
            squads = load_squads_from_yaml(find_vendored_org_file())
        except OSError:
            squads = {}
        return cls(squads)

    def get_owner_by_tribe_and_squad(self, tribe: str, squad: str) -> Owner:
        """Return the owner record of ``squad``."""
        details = self._squad_details(squad)
        owner = Owner(
            owner_id=details.jira_team_id,
            slack_channels={},
            projects={},
            display_name=squad,
        )
        if details.slack_url:
            owner.slack_channels[details.slack_title] = details.slack_url
        if details.jira_project_url:
            owner.projects[details.jira_project_name] = details.jira_project_url
        return owner

    def _squad_details(self, squad_name: str) -> SquadDetails:
        squad_name = squad_name.strip()
        group = self._squads.get(squad_name)
        if group is None:
            _log.info("known squads: %s", " ".join(f"'{name}'" for name in self._squads))
            raise SquadNotFoundError(f"squad '{squad_name}' not found")

        details = SquadDetails(
            tribe=group.spec.parent,
            jira_team_id=group.metadata.annotations.get("jiraTeamID", ""),
        )
        for link in group.metadata.links:
            link_type = link.type.lower()
            if link_type == "slack":
                details.slack_url = link.url
                details.slack_title = link.title
            elif link_type == "project" and link.icon.lower() == "jira":
                details.jira_project_url = link.url
                details.jira_project_name = link.title
        return details