"""
Profile repository for database access.

Encapsulates all Supabase queries and data mapping for the profiles table.
Backend failures are converted into ProfileFetchTransientError so callers
only ever see the auth module's exception taxonomy. Queries run in a worker
thread so the event loop is free while a round trip is in flight.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
from postgrest.exceptions import APIError
from pydantic import ValidationError
from supabase import Client

from shared.config import get_settings
from shared.repository import BaseRepository

from .exceptions import (
    ProfileAlreadyExistsError,
    ProfileFetchTransientError,
    ProfileNotFoundError,
)
from .models import Identity, Profile, ProfileDefaults, ProfilePreferences, ProfileUpdate

logger = logging.getLogger(__name__)

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


class ProfileRepository(BaseRepository[Profile]):
    """
    Repository for profile data access.

    Note: This repository does NOT perform authorization checks.
    Callers are responsible for passing the authenticated identity's ID.
    """

    def __init__(self, db: Client, table: Optional[str] = None) -> None:
        super().__init__(db)
        self._table = table or get_settings().profiles_table

    async def fetch_profile(self, identity_id: str) -> Profile:
        """
        Get the profile for an identity.

        Raises:
            ProfileNotFoundError: No row exists for the identity
            ProfileFetchTransientError: The query failed
        """
        row = await self._select_row(identity_id)
        if row is None:
            raise ProfileNotFoundError(identity_id)
        return self._map_to_profile(row)

    async def get_profile(self, identity_id: str) -> Optional[Profile]:
        """Like fetch_profile, but returns None when there is no profile."""
        row = await self._select_row(identity_id)
        return self._map_to_profile(row) if row else None

    async def create_profile(self, identity: Identity, defaults: ProfileDefaults) -> Profile:
        """
        Create the profile for a first-time user.

        Raises:
            ProfileAlreadyExistsError: The identity already has a profile
            ProfileFetchTransientError: The insert failed
        """
        if await self._select_row(identity.id) is not None:
            raise ProfileAlreadyExistsError(identity.id)

        now = _now_iso()
        email_name = identity.email.split("@")[0] if identity.email else ""
        data = {
            "id": identity.id,
            "email": identity.email,
            "display_name": defaults.display_name or identity.display_name or email_name,
            "avatar_url": identity.avatar_url,
            "timezone": defaults.timezone,
            "preferred_currency": defaults.preferred_currency,
            "email_verified": identity.email_verified,
            "preferences": defaults.preferences.model_dump(by_alias=True),
            "created_at": now,
            "last_login_at": now,
        }

        try:
            result = await self._execute(
                identity.id, self._db.table(self._table).insert(data)
            )
        except ProfileFetchTransientError as e:
            if isinstance(e.__cause__, APIError) and e.__cause__.code == UNIQUE_VIOLATION:
                raise ProfileAlreadyExistsError(identity.id)
            raise

        return self._map_to_profile(result.data[0])

    async def update_profile(self, identity_id: str, update: ProfileUpdate) -> Profile:
        """
        Apply a partial update to a profile.

        Raises:
            ProfileNotFoundError: No row exists for the identity
            ProfileFetchTransientError: The update failed
        """
        data = update.model_dump(exclude_unset=True, by_alias=True)
        if update.preferences is not None:
            # The column is replaced as a whole, so write every section
            data["preferences"] = update.preferences.model_dump(by_alias=True)
        if not data:
            return await self.fetch_profile(identity_id)

        result = await self._execute(
            identity_id,
            self._db.table(self._table).update(data).eq("id", identity_id),
        )
        if not result.data:
            raise ProfileNotFoundError(identity_id)
        return self._map_to_profile(result.data[0])

    async def touch_last_login(self, identity_id: str) -> None:
        """Set last_login_at to now. Missing profiles are left alone."""
        await self._execute(
            identity_id,
            self._db.table(self._table).update({"last_login_at": _now_iso()}).eq("id", identity_id),
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _execute(self, identity_id: str, query: Any) -> Any:
        """Run a built query off the event loop, mapping backend failures."""
        try:
            return await asyncio.to_thread(query.execute)
        except APIError as e:
            raise ProfileFetchTransientError(identity_id, e.message) from e
        except httpx.HTTPError as e:
            raise ProfileFetchTransientError(identity_id, str(e)) from e

    async def _select_row(self, identity_id: str) -> Optional[dict[str, Any]]:
        result = await self._execute(
            identity_id,
            self._db.table(self._table).select("*").eq("id", identity_id).limit(1),
        )
        if not result.data:
            return None
        return result.data[0]

    def _map_to_profile(self, row: dict[str, Any]) -> Profile:
        data = {
            "id": str(row["id"]),
            "email": row.get("email"),
            "display_name": row.get("display_name") or "",
            "avatar_url": row.get("avatar_url"),
            "timezone": row.get("timezone") or "",
            "preferred_currency": row.get("preferred_currency") or "",
            "email_verified": bool(row.get("email_verified", False)),
            "preferences": self._map_preferences(row.get("preferences")),
            "created_at": row.get("created_at"),
            "last_login_at": row.get("last_login_at"),
        }
        try:
            return Profile(**data)
        except ValidationError as e:
            invalid = {err["loc"][0] for err in e.errors() if err["loc"]}
            logger.warning(f"Ignoring invalid stored columns for {data['id']}: {sorted(invalid)}")
            return Profile(**{k: v for k, v in data.items() if k == "id" or k not in invalid})

    def _map_preferences(self, raw: Any) -> ProfilePreferences:
        """Load stored preferences, replacing invalid sections with defaults."""
        if not isinstance(raw, dict):
            return ProfilePreferences()

        sections = {}
        for name, field in ProfilePreferences.model_fields.items():
            value = raw.get(field.alias, raw.get(name))
            if value is None:
                continue
            try:
                sections[name] = field.annotation.model_validate(value)
            except ValidationError:
                logger.warning(f"Ignoring invalid stored preference section {field.alias}")
        return ProfilePreferences(**sections)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
