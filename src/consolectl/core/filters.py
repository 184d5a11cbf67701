"""Pure filtering and lookup logic for console entities.

Every function in this module is a **pure** transformation: no I/O,
no side effects, fully deterministic, and trivially unit-testable.

Pipeline order (enforced by :func:`select_orgs`):

1. **Filter** — keep only enterprise organizations.
2. **Narrow** — keep only the org matching a requested code, if any.
3. **Project** — reduce each org to ``{id, code, name}``.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from consolectl.core.models import ORG_TYPE_ENTERPRISE, Organization, Project, Workspace

E = TypeVar("E", Organization, Project, Workspace)


# ---------------------------------------------------------------------------
# 1. Filter
# ---------------------------------------------------------------------------

def filter_enterprise_orgs(orgs: Sequence[Organization]) -> list[Organization]:
    """Return only organizations whose type tag is ``entp``."""
    return [org for org in orgs if org.type == ORG_TYPE_ENTERPRISE]


# ---------------------------------------------------------------------------
# 2. Narrow
# ---------------------------------------------------------------------------

def filter_by_code(
    orgs: Sequence[Organization],
    code: str | None,
) -> list[Organization]:
    """Keep orgs whose code equals *code* exactly; no-op when *code* is falsy."""
    if not code:
        return list(orgs)
    return [org for org in orgs if org.code == code]


# ---------------------------------------------------------------------------
# 3. Project
# ---------------------------------------------------------------------------

def project_orgs(orgs: Sequence[Organization]) -> list[Organization]:
    """Drop everything but ``id``, ``code`` and ``name``."""
    return [Organization(id=org.id, code=org.code, name=org.name) for org in orgs]


# ---------------------------------------------------------------------------
# Composite pipeline
# ---------------------------------------------------------------------------

def select_orgs(
    orgs: Sequence[Organization],
    code: str | None = None,
) -> list[Organization]:
    """Run the full filter → narrow → project pipeline."""
    return project_orgs(filter_by_code(filter_enterprise_orgs(orgs), code))


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

def find_by_id_or_name(records: Sequence[E], identifier: str) -> E | None:
    """Return the first record whose id or name equals *identifier*.

    Ids win over names: a record whose id matches is preferred even when
    an earlier record happens to carry *identifier* as its name.
    """
    for record in records:
        if record.id == identifier:
            return record
    for record in records:
        if record.name == identifier:
            return record
    return None
