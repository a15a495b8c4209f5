"""
Per-community configuration values.

Database schema:
- community_settings: one row per guild
- community_roles: (guild_id, kind, role_id) for mentor/helper/moderator/ignored roles
- link_permissions: (guild_id, kind, target_id) allow-list for link posting
- triggers: keyword reminders, keywords and message stored as JSON
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Tuple


@dataclass(frozen=True, slots=True)
class LinkPermissionSet:
    """Who may post links in a community."""

    allowed_role_ids: FrozenSet[int] = frozenset()
    allowed_user_ids: FrozenSet[int] = frozenset()
    exempt_channel_ids: FrozenSet[int] = frozenset()

    def allows(self, channel_id: int, user_id: int, role_ids: List[int] | Tuple[int, ...]) -> bool:
        """Role match OR user match OR channel exemption."""
        if channel_id in self.exempt_channel_ids:
            return True
        if user_id in self.allowed_user_ids:
            return True
        return any(role_id in self.allowed_role_ids for role_id in role_ids)


@dataclass(frozen=True, slots=True)
class TriggerMessage:
    """Reply template of a trigger: plain ``content`` or an embed."""

    content: str = ""
    embed: bool = False
    title: str = ""
    description: str = ""
    color: Any = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TriggerMessage":
        return cls(
            content=str(data.get("content") or ""),
            embed=bool(data.get("embed", False)),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            color=data.get("color"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "embed": self.embed,
            "title": self.title,
            "description": self.description,
            "color": self.color,
        }


@dataclass(frozen=True, slots=True)
class Trigger:
    """A keyword reminder.

    ``keywords`` is a tuple of groups: every group must match (AND) and a
    group matches when any of its alternatives matches (OR).
    """

    trigger_id: str
    keywords: Tuple[Tuple[str, ...], ...]
    message: TriggerMessage
    cooldown_seconds: int = 0
    enabled: bool = True

    @property
    def cooldown_key(self) -> str:
        return f"trigger:{self.trigger_id}"


@dataclass(slots=True)
class CommunitySettings:
    """Everything the pipeline needs to know about one guild."""

    guild_id: int
    triggers: List[Trigger] = field(default_factory=list)
    mentor_role_ids: FrozenSet[int] = frozenset()
    helper_role_ids: FrozenSet[int] = frozenset()
    moderator_role_ids: FrozenSet[int] = frozenset()
    ignored_role_ids: FrozenSet[int] = frozenset()
    link_permissions: LinkPermissionSet = field(default_factory=LinkPermissionSet)

    def enabled_triggers(self) -> List[Trigger]:
        return [trigger for trigger in self.triggers if trigger.enabled]
