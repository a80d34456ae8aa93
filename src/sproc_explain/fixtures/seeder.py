"""Fixture records for EXPLAIN runs.

The point is not meaningful relationships between entities but making it
easy to replace procedure arguments with values that exist in the tables.
That's why one session token id is reused for every other token type: when
`tokenIdArg` or `inTokenId` is replaced with a literal, the value is present
whichever token table the query reads.
"""
from __future__ import annotations

import logging
import secrets
import time
from typing import Any, Protocol, Sequence

from ..errors import SeedingError
from ..procedures.registry import PlaceholderRegistry

logger = logging.getLogger(__name__)

DEFAULT_RECORD_COUNT = 100

INSERT_ACCOUNT = """
    INSERT INTO accounts (
        uid, normalizedEmail, email, emailCode, emailVerified, kA, wrapWrapKb,
        authSalt, verifierVersion, verifyHash, verifierSetAt, createdAt, locale
    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
"""

INSERT_EMAIL = """
    INSERT INTO emails (
        normalizedEmail, email, uid, emailCode, isVerified, isPrimary, verifiedAt, createdAt
    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
"""

INSERT_SESSION_TOKEN = """
    INSERT INTO sessionTokens (
        tokenId, tokenData, uid, createdAt, uaBrowser, uaBrowserVersion,
        uaOS, uaOSVersion, uaDeviceType, lastAccessTime
    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
"""

INSERT_UNVERIFIED_TOKEN = """
    INSERT INTO unverifiedTokens (tokenId, tokenVerificationId, uid, mustVerify)
    VALUES (%s, %s, %s, %s)
"""

INSERT_DEVICE = """
    INSERT INTO devices (uid, id, sessionTokenId, name, type, createdAt)
    VALUES (%s, %s, %s, %s, %s, %s)
"""

INSERT_KEY_FETCH_TOKEN = """
    INSERT INTO keyFetchTokens (tokenId, authKey, uid, keyBundle, createdAt)
    VALUES (%s, %s, %s, %s, %s)
"""

DELETE_PASSWORD_CHANGE_TOKENS = "DELETE FROM passwordChangeTokens WHERE uid = %s"

INSERT_PASSWORD_CHANGE_TOKEN = """
    INSERT INTO passwordChangeTokens (tokenId, tokenData, uid, createdAt)
    VALUES (%s, %s, %s, %s)
"""

DELETE_PASSWORD_FORGOT_TOKENS = "DELETE FROM passwordForgotTokens WHERE uid = %s"

INSERT_PASSWORD_FORGOT_TOKEN = """
    INSERT INTO passwordForgotTokens (tokenId, tokenData, uid, passCode, createdAt, tries)
    VALUES (%s, %s, %s, %s, %s, %s)
"""

DELETE_PASSWORD_FORGOT_TOKEN = "DELETE FROM passwordForgotTokens WHERE tokenId = %s"

DELETE_ACCOUNT_RESET_TOKENS = "DELETE FROM accountResetTokens WHERE uid = %s"

INSERT_ACCOUNT_RESET_TOKEN = """
    INSERT INTO accountResetTokens (tokenId, tokenData, uid, createdAt)
    VALUES (%s, %s, %s, %s)
"""


class FixtureDatabase(Protocol):
    async def execute(self, sql: str, params: Sequence[Any] = ()) -> Any:
        ...


def _now() -> int:
    return int(time.time() * 1000)


def _random_email() -> str:
    return f"{secrets.randbelow(10 ** 16):016d}@example.com"


class FixtureSeeder:
    """Creates representative records and records their ids as known args."""

    def __init__(
        self,
        db: FixtureDatabase,
        registry: PlaceholderRegistry,
        record_count: int = DEFAULT_RECORD_COUNT
    ):
        self.db = db
        self.registry = registry
        self.record_count = record_count

    async def seed(self) -> None:
        """Create record_count accounts, each with a full set of tokens.

        Raises:
            SeedingError: If any fixture statement fails
        """
        logger.info(f"Seeding {self.record_count} fixture accounts")
        try:
            for iteration in range(self.record_count):
                uid = await self.create_account()
                token_id = await self.create_session_token(uid)
                await self.create_device(uid, token_id)
                await self.create_key_fetch_token(uid, token_id)
                await self.create_password_change_token(uid, token_id)
                await self.create_password_forgot_token(uid, token_id)
                await self.create_account_reset_token(uid, token_id)
                logger.debug(f"Seeded fixture account {iteration + 1}/{self.record_count}")
        except SeedingError:
            raise
        except Exception as e:
            raise SeedingError(f"Failed to seed fixture records: {e}") from e

        logger.info(f"Seeding complete, {len(self.registry)} known arguments")

    async def create_account(self) -> bytes:
        email = _random_email()
        email_code = secrets.token_bytes(16)
        normalized_email = email.lower()
        created_at = _now()
        uid = secrets.token_bytes(16)

        self.registry.set_default("email", email)
        self.registry.set_default("emailcode", email_code)
        self.registry.set_default("normalizedemail", normalized_email)
        self.registry.set_default("uid", uid)

        await self.db.execute(INSERT_ACCOUNT, (
            uid,
            normalized_email,
            email,
            email_code,
            True,
            secrets.token_bytes(32),
            secrets.token_bytes(32),
            secrets.token_bytes(32),
            1,
            secrets.token_bytes(32),
            created_at,
            created_at,
            "en_US",
        ))
        await self.db.execute(INSERT_EMAIL, (
            normalized_email,
            email,
            uid,
            email_code,
            True,
            True,
            created_at,
            created_at,
        ))

        secondary_email = _random_email()
        await self.db.execute(INSERT_EMAIL, (
            secondary_email.lower(),
            secondary_email,
            uid,
            secrets.token_bytes(16),
            True,
            False,
            created_at,
            created_at,
        ))

        return uid

    async def create_session_token(self, uid: bytes) -> bytes:
        token_id = secrets.token_bytes(32)
        token_verification_id = secrets.token_bytes(16)
        created_at = _now()

        self.registry.set_default("sessiontokenid", token_id)
        self.registry.set_default("tokenid", token_id)
        self.registry.set_default("tokenverificationid", token_verification_id)

        await self.db.execute(INSERT_SESSION_TOKEN, (
            token_id,
            secrets.token_bytes(32),
            uid,
            created_at,
            self.registry.get("uabrowser"),
            self.registry.get("uabrowserversion"),
            self.registry.get("uaos"),
            self.registry.get("uaosversion"),
            self.registry.get("uadevicetype"),
            created_at,
        ))
        await self.db.execute(INSERT_UNVERIFIED_TOKEN, (
            token_id,
            token_verification_id,
            uid,
            True,
        ))

        return token_id

    async def create_device(self, uid: bytes, session_token_id: bytes) -> bytes:
        device_id = secrets.token_bytes(16)

        self.registry.set_default("deviceid", device_id)
        self.registry.set_default("id", device_id)

        await self.db.execute(INSERT_DEVICE, (
            uid,
            device_id,
            session_token_id,
            "fake device name",
            self.registry.get("uadevicetype"),
            _now(),
        ))
        return device_id

    async def create_key_fetch_token(self, uid: bytes, token_id: bytes) -> None:
        await self.db.execute(INSERT_KEY_FETCH_TOKEN, (
            token_id,
            secrets.token_bytes(32),
            uid,
            secrets.token_bytes(96),
            _now(),
        ))

    async def create_password_change_token(self, uid: bytes, token_id: bytes) -> None:
        await self.db.execute(DELETE_PASSWORD_CHANGE_TOKENS, (uid,))
        await self.db.execute(INSERT_PASSWORD_CHANGE_TOKEN, (
            token_id,
            secrets.token_bytes(32),
            uid,
            _now(),
        ))

    async def create_password_forgot_token(self, uid: bytes, token_id: bytes) -> None:
        await self.db.execute(DELETE_PASSWORD_FORGOT_TOKENS, (uid,))
        await self.db.execute(INSERT_PASSWORD_FORGOT_TOKEN, (
            token_id,
            secrets.token_bytes(32),
            uid,
            secrets.token_bytes(16),
            _now(),
            0,
        ))

    async def create_account_reset_token(self, uid: bytes, token_id: bytes) -> None:
        # A verified password forgot token is exchanged for the reset token
        password_forgot_token_id = secrets.token_bytes(32)
        await self.create_password_forgot_token(uid, password_forgot_token_id)
        await self.db.execute(DELETE_PASSWORD_FORGOT_TOKEN, (password_forgot_token_id,))
        await self.db.execute(DELETE_ACCOUNT_RESET_TOKENS, (uid,))
        await self.db.execute(INSERT_ACCOUNT_RESET_TOKEN, (
            token_id,
            secrets.token_bytes(32),
            uid,
            _now(),
        ))
