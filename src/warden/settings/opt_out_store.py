"""Per-user trigger opt-outs, read on every trigger evaluation."""

from __future__ import annotations

from warden.database.db_connection import ConnectionManager, STORE_ERRORS
from warden.errors import StorageUnavailable
from warden.repositories.opt_out_repo import OptOutRepo
from warden.util.logger import get_logger

logger = get_logger("opt_out_store")


class OptOutStore:
    """Existence records ``(guild_id, user_id, trigger_id)``."""

    def __init__(self, connection: ConnectionManager) -> None:
        self._connection = connection

    async def is_opted_out(self, guild_id: int, user_id: int, trigger_id: str) -> bool:
        try:
            async with self._connection.read() as conn:
                return await OptOutRepo.exists(conn, guild_id, user_id, trigger_id)
        except STORE_ERRORS as exc:
            raise StorageUnavailable(f"opt-out lookup for user {user_id}") from exc

    async def opt_out(self, guild_id: int, user_id: int, trigger_id: str) -> None:
        try:
            async with self._connection.transaction() as conn:
                await OptOutRepo.add(conn, guild_id, user_id, trigger_id)
        except STORE_ERRORS as exc:
            raise StorageUnavailable(f"opt-out write for user {user_id}") from exc
        logger.info("[OPT OUT] User %s opted out of trigger %s in guild %s", user_id, trigger_id, guild_id)

    async def opt_in(self, guild_id: int, user_id: int, trigger_id: str) -> None:
        try:
            async with self._connection.transaction() as conn:
                await OptOutRepo.remove(conn, guild_id, user_id, trigger_id)
        except STORE_ERRORS as exc:
            raise StorageUnavailable(f"opt-in write for user {user_id}") from exc
