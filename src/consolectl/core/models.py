"""Domain models for consolectl.

All models are **frozen** dataclasses: immutable value objects with no
behaviour beyond data access and conversion to/from the raw dicts the
console service returns.  They carry zero I/O and zero dependencies on
external packages.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

ORG_TYPE_ENTERPRISE: str = "entp"
"""Type tag of organizations that may be selected."""

T = TypeVar("T")


def _optional_str(value: object) -> str | None:
    return None if value is None else str(value)


# ---------------------------------------------------------------------------
# Console entities
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Organization:
    """An organization as listed by the console service."""

    id: str
    """Organization identifier."""

    code: str
    """IMS org code (e.g. ``ABC123@AdobeOrg``)."""

    name: str
    """Human-readable organization name."""

    type: str | None = None
    """Organization type tag.  Only ``entp`` orgs are selectable."""

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Organization:
        return cls(
            id=str(raw.get("id", "")),
            code=str(raw.get("code", "")),
            name=str(raw.get("name", "")),
            type=_optional_str(raw.get("type")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the persisted projection ``{id, code, name}``."""
        return {"id": self.id, "code": self.code, "name": self.name}


@dataclass(frozen=True, slots=True)
class Project:
    """A project scoped to exactly one organization."""

    id: str
    name: str
    title: str | None = None
    description: str | None = None
    org_id: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Project:
        return cls(
            id=str(raw.get("id", "")),
            name=str(raw.get("name", "")),
            title=_optional_str(raw.get("title")),
            description=_optional_str(raw.get("description")),
            org_id=_optional_str(raw.get("org_id")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "org_id": self.org_id,
        }


@dataclass(frozen=True, slots=True)
class Workspace:
    """A workspace scoped to exactly one project."""

    id: str
    name: str
    enabled: bool = True
    title: str | None = None
    description: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Workspace:
        return cls(
            id=str(raw.get("id", "")),
            name=str(raw.get("name", "")),
            # The service reports 0/1 rather than booleans.
            enabled=bool(raw.get("enabled", True)),
            title=_optional_str(raw.get("title")),
            description=_optional_str(raw.get("description")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "enabled": self.enabled,
            "title": self.title,
            "description": self.description,
        }


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

class SelectionLevel(enum.Enum):
    """One level of the Org → Project → Workspace hierarchy.

    Members are declared in hierarchy order; :meth:`deeper` relies on it.
    """

    ORG = ("org", "Organization")
    PROJECT = ("project", "Project")
    WORKSPACE = ("workspace", "Workspace")

    def __init__(self, config_key: str, label: str) -> None:
        self.config_key: str = config_key
        self.label: str = label

    @property
    def depth(self) -> int:
        return list(SelectionLevel).index(self)

    def deeper(self) -> tuple[SelectionLevel, ...]:
        """Return the levels strictly below this one."""
        return tuple(level for level in SelectionLevel if level.depth > self.depth)


@dataclass(frozen=True, slots=True)
class Selection:
    """Snapshot of the persisted selection.

    Any level may be ``None``.  The hierarchy invariant (a project
    implies an org, a workspace implies a project) is maintained by the
    state machine, not checked here.
    """

    org: Organization | None = None
    project: Project | None = None
    workspace: Workspace | None = None

    def get(self, level: SelectionLevel) -> Organization | Project | Workspace | None:
        return getattr(self, level.config_key)

    def missing(self, *levels: SelectionLevel) -> list[SelectionLevel]:
        """Return the requested levels that are unset, in hierarchy order."""
        wanted = levels or tuple(SelectionLevel)
        return [level for level in SelectionLevel if level in wanted and self.get(level) is None]

    def names(self) -> dict[str, str | None]:
        """Return ``{org, project, workspace}`` mapped to entity names."""
        return {
            level.config_key: getattr(self.get(level), "name", None)
            for level in SelectionLevel
        }


# ---------------------------------------------------------------------------
# Remote result envelope
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful directory call carrying its decoded body."""

    body: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err:
    """Failed directory call."""

    message: str
    status: int | None = None

    @property
    def ok(self) -> bool:
        return False


Envelope = Ok[T] | Err
