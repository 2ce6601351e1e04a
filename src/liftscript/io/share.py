"""
Share registry: publish workout text under a short code, resolve it back.

Codes are 6 characters from a 32-symbol alphabet without look-alike
characters, stored uppercase and matched case-insensitively.

Two backends share one interface:
- LocalShareRegistry: a JSON file, for offline use and tests
- SupabaseShareRegistry: the `shared_workouts` table, with the client
  injected via the constructor
"""

import json
import logging
import os
import secrets
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Protocol, TypedDict

from ..core.config import DEFAULT_SHARE_NAME, SHARE_CODE_ALPHABET, SHARE_CODE_LENGTH, SHARE_TABLE

logger = logging.getLogger(__name__)

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


class ShareError(Exception):
    """Raised when a workout cannot be published."""

    pass


class _CodeTaken(Exception):
    pass


class SharedWorkout(TypedDict):
    name: str
    text: str


class ShareRegistry(Protocol):
    def publish(self, text: str, name: str | None = None) -> str: ...

    def resolve(self, code: str) -> SharedWorkout | None: ...


def generate_share_code() -> str:
    """Random code, e.g. "K7MPQ2"."""
    return "".join(secrets.choice(SHARE_CODE_ALPHABET) for _ in range(SHARE_CODE_LENGTH))


def normalize_code(code: str) -> str:
    """Trim and uppercase a user-typed code."""
    return code.strip().upper()


class _RetryingPublisher(ABC):
    """publish() with a single retry on code collision."""

    @abstractmethod
    def _insert(self, code: str, name: str, text: str) -> None:
        """Store one share row; raise _CodeTaken when the code exists."""

    def publish(self, text: str, name: str | None = None) -> str:
        """
        Publish text and return its share code.

        Raises:
            ShareError: If publishing fails, or the retry code collides too
        """
        name = (name or "").strip() or DEFAULT_SHARE_NAME
        for attempt in range(2):
            code = generate_share_code()
            try:
                self._insert(code, name, text)
                return code
            except _CodeTaken:
                logger.debug("Share code %s taken (attempt %d)", code, attempt + 1)
        raise ShareError("Could not allocate a share code")


class LocalShareRegistry(_RetryingPublisher):
    """Share registry kept in a JSON file: {code: {name, workout_text}}."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> dict[str, dict[str, str]]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:  # ValueError: bad JSON or bad UTF-8
            logger.warning("Could not read share registry %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _insert(self, code: str, name: str, text: str) -> None:
        data = self._load()
        if code in data:
            raise _CodeTaken(code)
        data[code] = {"name": name, "workout_text": text}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            raise ShareError(f"Could not write share registry: {e}") from e

    def resolve(self, code: str) -> SharedWorkout | None:
        record = self._load().get(normalize_code(code))
        if not isinstance(record, dict) or "workout_text" not in record:
            return None
        return {"name": record.get("name") or DEFAULT_SHARE_NAME, "text": record["workout_text"]}


class SupabaseShareRegistry(_RetryingPublisher):
    """
    Share registry backed by a Supabase table.

    The client is injected via the constructor for testability.
    """

    def __init__(self, client: Any, table: str = SHARE_TABLE):
        """
        Args:
            client: Supabase client instance
            table: Table with columns code, name, workout_text
        """
        self._client = client
        self._table = table

    def _insert(self, code: str, name: str, text: str) -> None:
        try:
            self._client.table(self._table).insert(
                {"code": code, "name": name, "workout_text": text}
            ).execute()
        except Exception as e:
            if getattr(e, "code", None) == UNIQUE_VIOLATION:
                raise _CodeTaken(code) from e
            logger.warning("Failed to publish workout: %s", e)
            raise ShareError(f"Could not publish workout: {e}") from e

    def resolve(self, code: str) -> SharedWorkout | None:
        try:
            result = (
                self._client.table(self._table)
                .select("name, workout_text")
                .eq("code", normalize_code(code))
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.warning("Failed to look up share code %s: %s", code, e)
            return None
        if not result.data:
            return None
        row = result.data[0]
        return {"name": row.get("name") or DEFAULT_SHARE_NAME, "text": row["workout_text"]}


def get_supabase_client() -> Any | None:
    """Create a Supabase client from SUPABASE_URL / SUPABASE_ANON_KEY, or None."""
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_ANON_KEY")
    if not url or not key:
        logger.warning("Supabase credentials not configured. Sharing is disabled.")
        return None

    from supabase import create_client

    return create_client(url, key)


def get_share_registry(backend: str, data_dir: Path, table: str = SHARE_TABLE) -> ShareRegistry:
    """
    Registry for the configured backend.

    Raises:
        ShareError: If the supabase backend is selected but not configured
    """
    if backend == "supabase":
        client = get_supabase_client()
        if client is None:
            raise ShareError("Set SUPABASE_URL and SUPABASE_ANON_KEY to share via Supabase.")
        return SupabaseShareRegistry(client, table=table)
    return LocalShareRegistry(data_dir / "shared.json")
