"""
Capability levels of guild members.

Levels, lowest to highest:

=====  ==============================================================
 -1    member holds an ignored role; the pipeline stops after auto slow-mode
  0    regular member
  1    mentor role
  2    helper role
  3    moderator role, or Manage Server / Moderate Members permission
  4    Administrator permission
=====  ==============================================================
"""

from __future__ import annotations

from typing import Any, List

from warden.datatypes.community_settings import CommunitySettings

IGNORED = -1
USER = 0
MENTOR = 1
HELPER = 2
MODERATOR = 3
ADMINISTRATOR = 4


def member_role_ids(member: Any) -> List[int]:
    return [role.id for role in getattr(member, "roles", None) or []]


def permission_level(member: Any, settings: CommunitySettings) -> int:
    """Pure function of the member's permissions, roles and the guild's role config."""
    if member is None:
        return USER

    permissions = getattr(member, "guild_permissions", None)
    if permissions is not None and getattr(permissions, "administrator", False):
        return ADMINISTRATOR

    roles = set(member_role_ids(member))

    if roles & settings.moderator_role_ids:
        return MODERATOR
    if permissions is not None and (
        getattr(permissions, "manage_guild", False) or getattr(permissions, "moderate_members", False)
    ):
        return MODERATOR
    if roles & settings.ignored_role_ids:
        return IGNORED
    if roles & settings.helper_role_ids:
        return HELPER
    if roles & settings.mentor_role_ids:
        return MENTOR
    return USER
