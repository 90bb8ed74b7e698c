"""Authentication boundary: email/password, password reset and Google sign-in."""

import hashlib
import hmac
import logging
import re
import secrets
import uuid
from typing import Protocol

import httpx

from dinereserve.config import Config
from dinereserve.errors import AuthenticationError, InvalidRequestError, UpstreamError
from dinereserve.models import User, UserRole

logger = logging.getLogger(__name__)

GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"
MIN_PASSWORD_LENGTH = 8


def validate_password(password: str) -> list[str]:
    """Check password strength.

    Returns:
        Human-readable problems; empty when the password is acceptable
    """
    errors = []
    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )
    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        errors.append("Password must contain at least one lowercase letter")
    if not re.search(r"\d", password):
        errors.append("Password must contain at least one number")
    if not re.search(r"[!@#$%^&*(),.?\":{}|<>]", password):
        errors.append("Password must contain at least one special character")
    return errors


def fetch_google_user(client: httpx.Client, access_token: str) -> User:
    """Resolve a Google OAuth access token to a customer identity.

    Raises:
        AuthenticationError: If Google rejects the token
        UpstreamError: If Google cannot be reached
    """
    try:
        response = client.get(
            GOOGLE_USERINFO_URL, headers={"Authorization": f"Bearer {access_token}"}
        )
    except httpx.HTTPError as e:
        logger.exception("Google userinfo request failed")
        raise UpstreamError(f"Google sign-in failed: {e}") from e

    if response.status_code in (400, 401, 403):
        raise AuthenticationError("Google rejected the access token")
    if response.is_error:
        raise UpstreamError(f"Google sign-in failed with status {response.status_code}")

    data = response.json()
    return User(
        id=data["sub"],
        email=data["email"],
        name=data.get("name") or data["email"].split("@")[0],
        role=UserRole.CUSTOMER,
    )


class AuthService(Protocol):
    def login(self, email: str, password: str) -> User: ...

    def register(self, email: str, name: str, password: str) -> User: ...

    def request_password_reset(self, email: str) -> None: ...

    def login_with_google(self, access_token: str) -> User: ...


def _check_new_password(password: str) -> None:
    problems = validate_password(password)
    if problems:
        raise InvalidRequestError("; ".join(problems))


class SimulatedAuthService:
    """In-memory user registry for demos and tests.

    The configured admin credentials log straight in as an administrator.
    """

    def __init__(self, config: Config, client: httpx.Client | None = None) -> None:
        self.config = config
        self.client = client or httpx.Client(timeout=10.0)
        # email -> (user, salt, password hash)
        self._users: dict[str, tuple[User, bytes, bytes]] = {}
        self.reset_requests: list[str] = []

    @staticmethod
    def _hash(password: str, salt: bytes) -> bytes:
        return hashlib.pbkdf2_hmac("sha256", password.encode(), salt, 100_000)

    def add_user(self, user: User, password: str) -> None:
        salt = secrets.token_bytes(16)
        self._users[user.email.lower()] = (user, salt, self._hash(password, salt))

    def login(self, email: str, password: str) -> User:
        if (
            self.config.admin_email
            and self.config.admin_password
            and email.lower() == self.config.admin_email.lower()
            and hmac.compare_digest(password, self.config.admin_password)
        ):
            logger.info("Admin logged in with demo credentials")
            return User(
                id="admin-1",
                email=self.config.admin_email,
                name="Admin",
                role=UserRole.ADMIN,
            )

        entry = self._users.get(email.lower())
        if entry is None:
            raise AuthenticationError("Invalid email or password")

        user, salt, expected = entry
        if not hmac.compare_digest(self._hash(password, salt), expected):
            raise AuthenticationError("Invalid email or password")

        logger.info(f"User {user.id} logged in")
        return user

    def register(self, email: str, name: str, password: str) -> User:
        _check_new_password(password)
        if email.lower() in self._users:
            raise InvalidRequestError("An account with this email already exists")

        user = User(id=f"user-{uuid.uuid4().hex[:12]}", email=email, name=name)
        self.add_user(user, password)
        logger.info(f"Registered user {user.id}")
        return user

    def request_password_reset(self, email: str) -> None:
        # Unknown emails are accepted silently so accounts can't be probed.
        self.reset_requests.append(email.lower())
        logger.info("Password reset requested")

    def login_with_google(self, access_token: str) -> User:
        return fetch_google_user(self.client, access_token)


class SupabaseAuthService:
    """Email/password auth against Supabase's GoTrue REST API."""

    def __init__(
        self,
        config: Config,
        client: httpx.Client | None = None,
        google_client: httpx.Client | None = None,
    ) -> None:
        if not config.has_supabase_config():
            raise ValueError("Supabase is not configured")

        self.base_url = f"{config.supabase_url.rstrip('/')}/auth/v1"
        self.client = client or httpx.Client(
            timeout=10.0, headers={"apikey": config.supabase_key}
        )
        # Separate client so the Supabase key never reaches Google.
        self.google_client = google_client or httpx.Client(timeout=10.0)

    def _post(self, path: str, payload: dict) -> httpx.Response:
        try:
            return self.client.post(f"{self.base_url}{path}", json=payload)
        except httpx.HTTPError as e:
            logger.exception(f"Supabase auth request to {path} failed")
            raise UpstreamError(f"Authentication service unavailable: {e}") from e

    @staticmethod
    def _to_user(data: dict) -> User:
        metadata = data.get("user_metadata") or {}
        email = data["email"]
        return User(
            id=data["id"],
            email=email,
            name=metadata.get("name") or email.split("@")[0],
            role=UserRole.CUSTOMER,
        )

    def login(self, email: str, password: str) -> User:
        response = self._post(
            "/token?grant_type=password", {"email": email, "password": password}
        )
        if response.status_code in (400, 401):
            raise AuthenticationError("Invalid email or password")
        if response.is_error:
            raise UpstreamError(f"Login failed with status {response.status_code}")
        return self._to_user(response.json()["user"])

    def register(self, email: str, name: str, password: str) -> User:
        _check_new_password(password)
        response = self._post(
            "/signup", {"email": email, "password": password, "data": {"name": name}}
        )
        if response.status_code in (400, 422):
            message = response.json().get("msg", "Registration rejected")
            raise InvalidRequestError(message)
        if response.is_error:
            raise UpstreamError(
                f"Registration failed with status {response.status_code}"
            )
        data = response.json()
        return self._to_user(data.get("user") or data)

    def request_password_reset(self, email: str) -> None:
        response = self._post("/recover", {"email": email})
        if response.is_error:
            raise UpstreamError(
                f"Password reset failed with status {response.status_code}"
            )

    def login_with_google(self, access_token: str) -> User:
        return fetch_google_user(self.google_client, access_token)
