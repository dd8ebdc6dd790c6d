"""
API key management for TaskLedger.

Each key belongs to one user; the caller's role comes from that user.

Key Format:
  - User-visible: tl_<32-char-hex>
  - Storage: SHA-256 hash only (never plaintext)

Example:
    manager = KeyManager(db)
    key, key_info = manager.create_key("usr_123", "laptop")
    print(f"Your API key (save this): {key}")

    key_info = manager.validate_key(key)
"""

import hashlib
import logging
import secrets
import sqlite3
from dataclasses import dataclass

from ..database import Database
from ..models import now_iso

log = logging.getLogger(__name__)


@dataclass
class KeyInfo:
    """Metadata about an API key (never includes the hash or key itself)."""

    id: str
    user_id: str
    name: str
    created_at: str
    last_used_at: str | None
    is_active: bool


class KeyManager:
    """Manages API key lifecycle: creation, validation, revocation."""

    PREFIX = "tl_"
    KEY_LENGTH = 32  # Hex characters (128 bits of entropy)

    def __init__(self, db: Database):
        self.db = db

    @staticmethod
    def _generate_key() -> str:
        """Generate a cryptographically secure API key."""
        random_hex = secrets.token_hex(KeyManager.KEY_LENGTH // 2)
        return f"{KeyManager.PREFIX}{random_hex}"

    @staticmethod
    def _hash_key(key: str) -> str:
        """Hash a key using SHA-256 (one-way, not reversible)."""
        return hashlib.sha256(key.encode()).hexdigest()

    def create_key(self, user_id: str, name: str) -> tuple[str, KeyInfo]:
        """
        Create a new API key for a user.

        Args:
            user_id: Owner of the key
            name: Human-readable name for the key (e.g., "laptop")

        Returns:
            (key, key_info) tuple where key is the plaintext API key (only
            returned once)

        Raises:
            ValueError: If name is empty or the user does not exist
        """
        if not name or not name.strip():
            raise ValueError("name cannot be empty")
        if not self.db.exists("users", "id = ?", (user_id,)):
            raise ValueError(f"Unknown user: {user_id}")

        key = self._generate_key()
        key_id = f"key_{secrets.token_hex(8)}"
        now = now_iso()

        try:
            self.db.insert(
                "api_keys",
                {
                    "id": key_id,
                    "key_hash": self._hash_key(key),
                    "user_id": user_id,
                    "name": name,
                    "created_at": now,
                    "is_active": 1,
                },
            )
        except sqlite3.IntegrityError as e:
            log.error(f"Failed to create API key: {e}")
            raise ValueError(f"Failed to create API key: {e}") from e

        log.info(f"Created API key: {key_id} (user={user_id}, name={name})")
        key_info = KeyInfo(
            id=key_id,
            user_id=user_id,
            name=name,
            created_at=now,
            last_used_at=None,
            is_active=True,
        )
        return key, key_info

    def validate_key(self, key: str) -> KeyInfo | None:
        """
        Validate an API key and return its metadata if valid.

        Updates last_used_at on success.

        Returns:
            KeyInfo if valid, None if unknown or inactive
        """
        if not key or not key.startswith(self.PREFIX):
            return None

        row = self.db.fetch_one(
            """
            SELECT id, user_id, name, created_at, last_used_at, is_active
            FROM api_keys
            WHERE key_hash = ?
            """,
            (self._hash_key(key),),
        )
        if not row:
            return None
        if not row["is_active"]:
            log.debug(f"Key {row['id']} is inactive")
            return None

        now = now_iso()
        self.db.update("api_keys", {"last_used_at": now}, "id = ?", [row["id"]])

        return KeyInfo(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            created_at=row["created_at"],
            last_used_at=now,
            is_active=True,
        )

    def revoke_key(self, key_id: str) -> bool:
        """
        Revoke (deactivate) an API key by ID.

        Returns:
            True if revoked, False if not found
        """
        count = self.db.update("api_keys", {"is_active": 0}, "id = ?", [key_id])
        if count == 0:
            log.warning(f"Key not found: {key_id}")
            return False
        log.info(f"Revoked API key: {key_id}")
        return True

    def list_keys(self, user_id: str | None = None) -> list[KeyInfo]:
        sql = "SELECT id, user_id, name, created_at, last_used_at, is_active FROM api_keys"
        params: tuple = ()
        if user_id:
            sql += " WHERE user_id = ?"
            params = (user_id,)
        rows = self.db.fetch_all(sql + " ORDER BY created_at", params)
        return [
            KeyInfo(
                id=row["id"],
                user_id=row["user_id"],
                name=row["name"],
                created_at=row["created_at"],
                last_used_at=row["last_used_at"],
                is_active=bool(row["is_active"]),
            )
            for row in rows
        ]
