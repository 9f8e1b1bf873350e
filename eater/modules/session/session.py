import asyncio
import logging
import re
from typing import Dict, MutableMapping, Optional

from ..auth.interfaces import Authenticator
from ..auth.models import (
    AuthError,
    AuthErrorKind,
    AuthResult,
    Credentials,
    Session,
    UserProfile,
)
from ..credentials import CredentialStore

logger = logging.getLogger(__name__)

# Credential slots. Token presence is the authority signal, so it is always
# written and deleted before the user id.
TOKEN_KEY = "token"
USER_ID_KEY = "userId"
PENDING_VERIFICATION_KEY = "pendingVerificationId"
PENDING_PHONE_KEY = "pendingPhoneNumber"

# Legacy plaintext preference names -> credential slots
LEGACY_SLOTS: Dict[str, str] = {"firebaseToken": TOKEN_KEY, "userId": USER_ID_KEY}

E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")
VERIFICATION_CODE_PATTERN = re.compile(r"^\d{6}$")

DEFAULT_MIN_SECRET_LENGTH = 6


class SessionManager:
    def __init__(
        self,
        store: CredentialStore,
        authenticator: Authenticator,
        min_secret_length: int = DEFAULT_MIN_SECRET_LENGTH,
    ):
        """
        Initialize session manager.

        Args:
            store: Credential store holding the session slots
            authenticator: Identity provider issuing tokens
            min_secret_length: Minimum password length accepted by sign_up
        """
        self.store = store
        self.authenticator = authenticator
        self.min_secret_length = min_secret_length

        # Serializes every operation that writes session slots, for its
        # whole duration including the authenticator round trip
        self._lock = asyncio.Lock()

        # Profile decoration for the signed-in user; never an authority signal
        self._profile: Optional[UserProfile] = None
        self._profile_user_id: Optional[str] = None

    async def sign_in(self, identifier: str, secret: str) -> AuthResult:
        """
        Sign in and persist the issued credentials.

        Empty identifier or secret fails with INVALID_CREDENTIALS before any I/O.
        Signing in again simply replaces the previous session.
        """
        if not identifier or not identifier.strip() or not secret:
            return AuthResult.failed(AuthError(AuthErrorKind.INVALID_CREDENTIALS))

        async with self._lock:
            try:
                credentials = await self.authenticator.sign_in(identifier.strip(), secret)
            except AuthError as e:
                logger.info(f"Sign in rejected: {e.kind.value}")
                return AuthResult.failed(e)

            result = await self._persist(credentials)

        if result.ok:
            logger.info(f"Signed in user {credentials.user_id}")
        return result

    async def sign_up(
        self, identifier: str, secret: str, display_name: Optional[str] = None
    ) -> AuthResult:
        """
        Create an account, then persist credentials exactly like sign_in.

        Secrets shorter than min_secret_length fail before the authenticator
        is contacted.
        """
        if not identifier or not identifier.strip() or not secret:
            return AuthResult.failed(AuthError(AuthErrorKind.INVALID_CREDENTIALS))

        if len(secret) < self.min_secret_length:
            return AuthResult.failed(
                AuthError(
                    AuthErrorKind.INVALID_CREDENTIALS,
                    f"Password must be at least {self.min_secret_length} characters",
                )
            )

        async with self._lock:
            try:
                credentials = await self.authenticator.sign_up(
                    identifier.strip(), secret, display_name
                )
            except AuthError as e:
                logger.info(f"Sign up rejected: {e.kind.value}")
                return AuthResult.failed(e)

            if display_name and not credentials.profile.display_name:
                credentials.profile.display_name = display_name

            result = await self._persist(credentials)

        if result.ok:
            logger.info(f"Created account for user {credentials.user_id}")
        return result

    async def sign_out(self) -> AuthResult:
        """
        Remove the session slots.

        Idempotent: signing out with no session succeeds. A failure to notify
        the authenticator is logged and does not block the local sign-out.
        """
        async with self._lock:
            token = await self.store.get(TOKEN_KEY)
            if token is not None:
                try:
                    await self.authenticator.sign_out(token)
                except AuthError as e:
                    logger.warning(f"Remote sign out failed, clearing local session anyway: {e.kind.value}")

            self._clear_profile()
            if not await self._clear_slots():
                return AuthResult.failed(AuthError(AuthErrorKind.STORAGE_FAILURE))

        logger.info("Signed out")
        return AuthResult.unauthenticated()

    async def current_session(self) -> Optional[Session]:
        """
        Reconstruct the session from the credential slots.

        Pure read. Returns None unless both the token and user id are present.
        """
        token = await self.store.get(TOKEN_KEY)
        if token is None:
            return None

        user_id = await self.store.get(USER_ID_KEY)
        if user_id is None:
            return None

        profile = self._profile if self._profile_user_id == user_id else None
        return Session(
            user_id=user_id,
            token=token,
            display_name=profile.display_name if profile else None,
            phone_number=profile.phone_number if profile else None,
        )

    async def is_authenticated(self) -> bool:
        return await self.current_session() is not None

    async def refresh_token(self, force: bool = False) -> AuthResult:
        """
        Ask the authenticator for a fresh token and overwrite the token slot.

        Requires a complete session: an orphaned user id is not signed in and
        is never promoted back to a session. The user id slot is never
        touched. On failure the existing session is left intact; only this
        caller sees the error.
        """
        async with self._lock:
            current = await self.current_session()
            if current is None:
                return AuthResult.failed(AuthError(AuthErrorKind.NOT_AUTHENTICATED))

            user_id = current.user_id
            try:
                token = await self.authenticator.refresh_token(user_id, current.token, force)
            except AuthError as e:
                logger.warning(f"Token refresh failed, keeping existing session: {e.kind.value}")
                return AuthResult.failed(e)

            if token != current.token and not await self.store.save(TOKEN_KEY, token):
                return AuthResult.failed(AuthError(AuthErrorKind.STORAGE_FAILURE))

        session = await self.current_session()
        if session is None:
            return AuthResult.failed(AuthError(AuthErrorKind.NOT_AUTHENTICATED))
        logger.info(f"Refreshed token for user {user_id}")
        return AuthResult.authenticated(session)

    async def restore(self) -> AuthResult:
        """
        Reconcile the slots at startup.

        A token or user id left alone by an interrupted write is deleted, so
        the next start sees a clean unauthenticated state.
        """
        async with self._lock:
            has_token = await self.store.exists(TOKEN_KEY)
            has_user = await self.store.exists(USER_ID_KEY)

            if has_token != has_user:
                orphan = TOKEN_KEY if has_token else USER_ID_KEY
                logger.warning(f"Found orphaned '{orphan}' slot, clearing partial session")
                if not await self._clear_slots():
                    return AuthResult.failed(AuthError(AuthErrorKind.STORAGE_FAILURE))
                return AuthResult.unauthenticated()

        session = await self.current_session()
        if session is None:
            return AuthResult.unauthenticated()
        return AuthResult.authenticated(session)

    async def migrate_legacy(self, source: MutableMapping[str, str]) -> AuthResult:
        """
        Move plaintext session values from legacy preferences into the store.

        Returns:
            The resulting session state after migration
        """
        async with self._lock:
            expected = [slot for legacy, slot in LEGACY_SLOTS.items() if legacy in source]
            migrated = await self.store.migrate_from(source, LEGACY_SLOTS)
            if migrated != expected:
                return AuthResult.failed(AuthError(AuthErrorKind.STORAGE_FAILURE))

        return await self.restore()

    async def send_phone_verification(self, phone_number: str) -> AuthResult:
        """
        Request an SMS code and remember the pending verification.

        Returns:
            UNAUTHENTICATED with verification_id set, or FAILED
        """
        if not E164_PATTERN.match(phone_number or ""):
            return AuthResult.failed(AuthError(AuthErrorKind.INVALID_PHONE_NUMBER))

        async with self._lock:
            try:
                verification_id = await self.authenticator.send_phone_verification(phone_number)
            except AuthError as e:
                return AuthResult.failed(e)

            if not (
                await self.store.save(PENDING_VERIFICATION_KEY, verification_id)
                and await self.store.save(PENDING_PHONE_KEY, phone_number)
            ):
                return AuthResult.failed(AuthError(AuthErrorKind.STORAGE_FAILURE))

        return AuthResult.unauthenticated(verification_id=verification_id)

    async def verify_phone_code(self, code: str) -> AuthResult:
        """Complete phone sign-in with the six-digit code from the SMS."""
        async with self._lock:
            verification_id = await self.store.get(PENDING_VERIFICATION_KEY)
            phone_number = await self.store.get(PENDING_PHONE_KEY)
            if verification_id is None or phone_number is None:
                return AuthResult.failed(
                    AuthError(AuthErrorKind.INVALID_VERIFICATION_CODE, "No pending verification")
                )

            if not VERIFICATION_CODE_PATTERN.match(code or ""):
                return AuthResult.failed(AuthError(AuthErrorKind.INVALID_VERIFICATION_CODE))

            try:
                credentials = await self.authenticator.verify_phone_code(
                    verification_id, code, phone_number
                )
            except AuthError as e:
                return AuthResult.failed(e)

            if not credentials.profile.phone_number:
                credentials.profile.phone_number = phone_number

            result = await self._persist(credentials)
            if result.ok:
                await self.store.delete(PENDING_VERIFICATION_KEY)
                await self.store.delete(PENDING_PHONE_KEY)

        return result

    async def _persist(self, credentials: Credentials) -> AuthResult:
        """Write token then user id. Caller holds the session lock."""
        if not await self.store.save(TOKEN_KEY, credentials.token):
            return AuthResult.failed(AuthError(AuthErrorKind.STORAGE_FAILURE))

        if not await self.store.save(USER_ID_KEY, credentials.user_id):
            # Roll back so a token never outlives a failed sign-in
            await self.store.delete(TOKEN_KEY)
            return AuthResult.failed(AuthError(AuthErrorKind.STORAGE_FAILURE))

        self._profile = credentials.profile
        self._profile_user_id = credentials.user_id

        return AuthResult.authenticated(
            Session(
                user_id=credentials.user_id,
                token=credentials.token,
                display_name=credentials.profile.display_name,
                phone_number=credentials.profile.phone_number,
            )
        )

    async def _clear_slots(self) -> bool:
        token_cleared = await self.store.delete(TOKEN_KEY)
        user_cleared = await self.store.delete(USER_ID_KEY)
        return token_cleared and user_cleared

    def _clear_profile(self):
        self._profile = None
        self._profile_user_id = None
