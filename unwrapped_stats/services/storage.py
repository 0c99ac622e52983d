"""Database storage service for the cached summary snapshot and display preferences"""
import logging
from typing import Optional

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError
from sqlalchemy.exc import SQLAlchemyError

from unwrapped_stats.config import settings
from unwrapped_stats.db import Database
from unwrapped_stats.estimator import Currency
from unwrapped_stats.models.db import StorageSlot
from unwrapped_stats.models.snapshot import SummarySnapshot

logger = logging.getLogger(__name__)

class SnapshotStore:
    """
    Persists one summary snapshot under a fixed key, plus the currency and
    albums-limit preferences under their own keys.

    No method raises on storage or decoding failures: writes report False
    and reads report None.
    """

    def __init__(self, database: Database, key: Optional[str] = None,
                 currency_key: Optional[str] = None, albums_limit_key: Optional[str] = None):
        self.database = database
        self.key = key or settings.SNAPSHOT_KEY
        self.currency_key = currency_key or settings.CURRENCY_KEY
        self.albums_limit_key = albums_limit_key or settings.ALBUMS_LIMIT_KEY
        if not database.initialized:
            database.init()

    # --- Snapshot slot ---

    def save(self, snapshot: SummarySnapshot) -> bool:
        """Serialize and store the snapshot; the previous one is kept if anything fails"""
        try:
            payload = snapshot.model_dump_json()
        except (PydanticSerializationError, ValueError, TypeError) as e:
            logger.error(f"Failed to serialize snapshot: {e}")
            return False

        if self._put(self.key, payload):
            logger.info(f"Snapshot saved ({len(snapshot.artists)} artists, {len(snapshot.albums)} albums)")
            return True
        return False

    def load(self) -> Optional[SummarySnapshot]:
        """Return the stored snapshot, or None when the slot is empty or unreadable"""
        payload = self._get(self.key)
        if payload is None:
            logger.info("No stored snapshot found")
            return None

        try:
            snapshot = SummarySnapshot.model_validate_json(payload)
        except ValidationError as e:
            logger.error(f"Stored snapshot is not well-formed: {e}")
            return None

        logger.info(f"Snapshot loaded (saved: {snapshot.timestamp.isoformat()})")
        return snapshot

    def clear(self) -> bool:
        """Remove the stored snapshot; clearing an empty slot succeeds"""
        return self._delete(self.key)

    def exists(self) -> bool:
        """Check for a stored snapshot without decoding it"""
        try:
            with self.database.session() as session:
                return session.query(StorageSlot.key).filter_by(key=self.key).first() is not None
        except SQLAlchemyError as e:
            logger.error(f"Database error checking for snapshot: {e}")
            return False

    # --- Preferences ---

    def save_currency(self, currency: Currency) -> bool:
        return self._put(self.currency_key, Currency(currency).value)

    def load_currency(self, default: Optional[Currency] = None) -> Currency:
        """Stored currency preference, falling back to the configured default"""
        fallback = Currency(default or settings.DEFAULT_CURRENCY)
        stored = self._get(self.currency_key)
        if stored is None:
            return fallback
        try:
            return Currency(stored)
        except ValueError:
            logger.warning(f"Ignoring unknown stored currency {stored!r}")
            return fallback

    def save_albums_limit(self, limit: int) -> bool:
        if limit <= 0:
            logger.error(f"Refusing to store non-positive albums limit {limit}")
            return False
        return self._put(self.albums_limit_key, str(int(limit)))

    def load_albums_limit(self, default: Optional[int] = None) -> int:
        """Stored albums display limit, falling back to the configured default"""
        fallback = default or settings.ALBUMS_LIMIT
        stored = self._get(self.albums_limit_key)
        if stored is None:
            return fallback
        try:
            limit = int(stored)
        except ValueError:
            logger.warning(f"Ignoring malformed stored albums limit {stored!r}")
            return fallback
        return limit if limit > 0 else fallback

    # --- Slot primitives ---

    def _put(self, key: str, value: str) -> bool:
        try:
            with self.database.session() as session:
                slot = session.get(StorageSlot, key)
                if slot:
                    slot.value = value
                else:
                    session.add(StorageSlot(key=key, value=value))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database error writing slot {key}: {e}")
            return False

    def _get(self, key: str) -> Optional[str]:
        try:
            with self.database.session() as session:
                slot = session.get(StorageSlot, key)
                return slot.value if slot else None
        except SQLAlchemyError as e:
            logger.error(f"Database error reading slot {key}: {e}")
            return None

    def _delete(self, key: str) -> bool:
        try:
            with self.database.session() as session:
                session.query(StorageSlot).filter_by(key=key).delete()
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database error clearing slot {key}: {e}")
            return False
