# services/auth.py
import logging
from typing import Optional

from passlib.context import CryptContext

from db import ProjectStore, UserStore
from errors import AuthError, StoreError
from models.records import Identity, default_avatar
from services.projects import SessionContext

logger = logging.getLogger(__name__)

ROLES = ("student", "professor")
INVALID_LOGIN = "Invalid login credentials. Please check your email and password."
AUTH_UNAVAILABLE = "Accounts are unavailable right now. Please try again later."

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def _identity(row: dict, fallback_role: str = "student") -> Identity:
    email = row["email"]
    return Identity(
        id=row["id"],
        email=email,
        name=row.get("name") or email.split("@")[0],
        role=row.get("role") or fallback_role,
        avatar=row.get("avatar") or default_avatar(email),
    )


class SessionStore:
    """Holds the signed-in identity and its SessionContext.

    Signing in (or up) opens a fresh context and loads its projects;
    signing out closes it.
    """

    def __init__(self, users: Optional[UserStore] = None, projects: Optional[ProjectStore] = None):
        self.users = users or UserStore()
        self.projects = projects or ProjectStore(self.users.bind)
        self.current: Optional[SessionContext] = None

    @property
    def identity(self) -> Optional[Identity]:
        return self.current.identity if self.current else None

    def _open(self, identity: Identity) -> SessionContext:
        if self.current is not None:
            self.current.close()
        self.current = SessionContext(identity, self.projects)
        self.current.load_projects()
        return self.current

    def sign_up(self, email: str, password: str, name: str, role: str = "student") -> SessionContext:
        if role not in ROLES:
            raise AuthError(f"Unknown role: {role}")
        if not email or not password:
            raise AuthError("Email and password are required")
        try:
            if self.users.get_by_email(email):
                raise AuthError("User already registered")
            row = self.users.create(email, pwd_context.hash(password), name, role,
                                    avatar=default_avatar(email.strip().lower()))
        except StoreError as e:
            logger.error("Sign-up failed for %s: %s", email, e)
            raise AuthError(AUTH_UNAVAILABLE) from e
        logger.info("Signed up %s as %s", row["email"], role)
        return self._open(_identity(row, role))

    def sign_in(self, email: str, password: str, role: str = "student") -> SessionContext:
        try:
            row = self.users.get_by_email(email or "")
        except StoreError as e:
            logger.error("Sign-in failed for %s: %s", email, e)
            raise AuthError(AUTH_UNAVAILABLE) from e
        if not row or not pwd_context.verify(password or "", row["password_hash"]):
            logger.warning("Failed sign-in for %s", email)
            raise AuthError(INVALID_LOGIN)
        # the stored role wins over whatever the sign-in form asked for
        return self._open(_identity(row, role))

    def sign_out(self) -> None:
        try:
            if self.current is not None:
                self.current.close()
        except Exception:
            logger.exception("Logout error")
        finally:
            self.current = None
