"""
Record store for athlete profile data.

Thin SQL wrappers over the Supabase tables the profile editor writes to.
Every method returns plain dict rows; shaping into the snapshot happens in
``domain.normalize``.
"""

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from app.db.helpers import execute_query, execute_transaction, fetch_all, fetch_one, fetch_val
from app.db.pool import DatabasePoolManager
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

# search event -> athlete_search_stats counter column
SEARCH_EVENT_COLUMNS = {
    "search_impression": "search_impressions",
    "profile_view": "profile_views",
    "contact_unlock": "contact_unlocks",
}


class ProfileRecordRepository:
    """Reads and writes the rows behind an athlete profile."""

    def __init__(self, pool: DatabasePoolManager):
        self.pool = pool

    async def fetch_athlete(self, athlete_id: str) -> dict[str, Any] | None:
        return await fetch_one(
            self.pool,
            """
            SELECT id, first_name, phone, current_step, completion_percentage,
                   profile_published, created_at
            FROM athlete
            WHERE id = %s
            """,
            (athlete_id,),
        )

    async def fetch_contacts_verification(self, athlete_id: str) -> dict[str, Any] | None:
        return await fetch_one(
            self.pool,
            "SELECT * FROM contacts_verification WHERE athlete_id = %s",
            (athlete_id,),
        )

    async def fetch_latest_sports_experience(self, athlete_id: str) -> dict[str, Any] | None:
        return await fetch_one(
            self.pool,
            """
            SELECT * FROM sports_experiences
            WHERE athlete_id = %s
            ORDER BY id DESC
            LIMIT 1
            """,
            (athlete_id,),
        )

    async def fetch_latest_physical(self, athlete_id: str) -> dict[str, Any] | None:
        return await fetch_one(
            self.pool,
            """
            SELECT * FROM physical_data
            WHERE athlete_id = %s
            ORDER BY id DESC
            LIMIT 1
            """,
            (athlete_id,),
        )

    async def fetch_awards(self, athlete_id: str) -> list[dict[str, Any]]:
        return await fetch_all(
            self.pool,
            """
            SELECT * FROM awards_recognitions
            WHERE athlete_id = %s
            ORDER BY season_start DESC NULLS LAST, date_awarded DESC NULLS LAST, id DESC
            """,
            (athlete_id,),
        )

    async def fetch_media(
        self, athlete_id: str
    ) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
        """Return media items and the game metadata rows linked to ``game`` items."""
        items = await fetch_all(
            self.pool,
            "SELECT * FROM media_item WHERE athlete_id = %s",
            (athlete_id,),
        )
        game_ids = [row["id"] for row in items if row.get("category") == "game"]
        if not game_ids:
            return items, []

        game_meta = await fetch_all(
            self.pool,
            "SELECT * FROM media_game_meta WHERE media_item_id = ANY(%s)",
            (game_ids,),
        )
        return items, game_meta

    async def fetch_social_profiles(self, athlete_id: str) -> list[dict[str, Any]]:
        return await fetch_all(
            self.pool,
            """
            SELECT * FROM social_profiles
            WHERE athlete_id = %s
            ORDER BY sort_order ASC NULLS LAST, created_at ASC
            """,
            (athlete_id,),
        )

    async def fetch_search_stats(self, athlete_id: str) -> dict[str, Any] | None:
        return await fetch_one(
            self.pool,
            """
            SELECT athlete_id, search_impressions, profile_views, contact_unlocks,
                   first_seen_at, last_seen_at
            FROM athlete_search_stats
            WHERE athlete_id = %s
            """,
            (athlete_id,),
        )

    async def count_messaging_operators(self, athlete_id: str) -> int:
        """Distinct operators that sent a message or own a thread with this athlete."""
        count = await fetch_val(
            self.pool,
            """
            SELECT COUNT(DISTINCT operator_id) FROM (
                SELECT m.sender_op_id AS operator_id
                FROM chat_message m
                JOIN chat_thread t ON t.id = m.thread_id
                WHERE m.sender_kind = 'OP' AND t.athlete_id = %s
                  AND m.sender_op_id IS NOT NULL
                UNION
                SELECT t.op_id AS operator_id
                FROM chat_message m
                JOIN chat_thread t ON t.id = m.thread_id
                WHERE m.sender_kind = 'OP' AND t.athlete_id = %s
                  AND t.op_id IS NOT NULL
            ) operators
            """,
            (athlete_id, athlete_id),
        )
        return int(count or 0)

    async def update_completion_percentage(self, athlete_id: str, completion: int) -> bool:
        affected = await execute_query(
            self.pool,
            "UPDATE athlete SET completion_percentage = %s WHERE id = %s",
            (completion, athlete_id),
        )
        return affected > 0

    async def set_profile_published(self, athlete_id: str, published: bool) -> bool:
        affected = await execute_query(
            self.pool,
            "UPDATE athlete SET profile_published = %s WHERE id = %s",
            (published, athlete_id),
        )
        return affected > 0

    async def increment_search_stats(self, athlete_ids: Sequence[str], event_type: str) -> None:
        """Bump one counter for every athlete in a single transaction."""
        column = SEARCH_EVENT_COLUMNS[event_type]
        if not athlete_ids:
            return

        now = datetime.now(UTC)
        # column comes from the fixed mapping above, never from user input
        query = f"""
            INSERT INTO athlete_search_stats
                (athlete_id, {column}, first_seen_at, last_seen_at)
            VALUES (%s, 1, %s, %s)
            ON CONFLICT (athlete_id) DO UPDATE
            SET {column} = COALESCE(athlete_search_stats.{column}, 0) + 1,
                first_seen_at = COALESCE(athlete_search_stats.first_seen_at, EXCLUDED.first_seen_at),
                last_seen_at = EXCLUDED.last_seen_at
        """
        await execute_transaction(
            self.pool, [(query, (athlete_id, now, now)) for athlete_id in athlete_ids]
        )
        logger.debug(
            "Athlete search stats incremented",
            event_type=event_type,
            athlete_count=len(athlete_ids),
        )
