"""Repository layer for community settings database access."""
from warden.settings.repositories.community_settings_repo import CommunitySettingsRepository
from warden.settings.repositories.community_roles_repo import CommunityRolesRepository
from warden.settings.repositories.link_permissions_repo import LinkPermissionsRepository
from warden.settings.repositories.trigger_repo import TriggerRepository

__all__ = [
    "CommunitySettingsRepository",
    "CommunityRolesRepository",
    "LinkPermissionsRepository",
    "TriggerRepository",
]
