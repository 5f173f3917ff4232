"""Field resolution: which destination field a source field maps to.

Destination name priority:
1. Primary tag (``Policy.tag_name``), unless it is the exclusion marker
2. Secondary tag (json metadata / pydantic alias), when enabled
3. Field-name transform, when configured
4. The declared source field name

Destination lookup is exact first, then case-insensitive when the policy
allows it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from structmap.core.fields.models import FieldMeta, StructLayout
from structmap.core.types import EXCLUDE_MARKER

if TYPE_CHECKING:
    from structmap.config.policy import Policy


def _usable(tag: str | None) -> bool:
    return bool(tag) and tag != EXCLUDE_MARKER


def participates(meta: FieldMeta, policy: Policy) -> bool:
    """Check whether a source field takes part in mapping at all.

    Args:
        meta: Source field.
        policy: Active policy.

    Returns:
        False for private fields under the unexported-skip policy (unless
        private fields are explicitly allowed) and, when a tag key is
        configured, for fields whose tag is missing or the exclusion marker.
    """
    if meta.private and policy.ignore_unexported and not policy.allow_private_fields:
        return False
    if policy.tag_name:
        return _usable(meta.tag(policy.tag_name))
    return True


def destination_name(meta: FieldMeta, policy: Policy) -> str:
    """Resolve the destination field name for a source field."""
    if policy.tag_name:
        tag = meta.tag(policy.tag_name)
        if tag is not None and _usable(tag):
            return tag
    if policy.use_secondary_tag and meta.secondary is not None and _usable(meta.secondary):
        return meta.secondary
    if policy.field_name_transform is not None:
        return policy.field_name_transform(meta.name)
    return meta.name


def find_destination(layout: StructLayout, name: str, policy: Policy) -> FieldMeta | None:
    """Locate a destination field by resolved name.

    Args:
        layout: Destination struct layout.
        name: Resolved destination field name.
        policy: Active policy (case sensitivity).

    Returns:
        Matching field, or None if the destination has no such field.
    """
    found = layout.get(name)
    if found is None and not policy.case_sensitive:
        found = layout.find_casefold(name)
    return found
