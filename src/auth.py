# src/auth.py
"""Authentication manager."""

from decimal import Decimal
from typing import Optional

import bcrypt
from sqlmodel import Session, select

from src.db.models import Account, User
from src.logging_utils import get_logger

logger = get_logger(__name__)


class AuthManager:
    """Handle user registration and authentication."""

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash password with bcrypt."""
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()

    @staticmethod
    def verify_password(password: str, hashed: str) -> bool:
        """Verify password against hash."""
        return bcrypt.checkpw(password.encode(), hashed.encode())

    @staticmethod
    def authenticate(session: Session, email: str, password: str) -> User | None:
        """Authenticate user by email."""
        stmt = select(User).where(User.email == email.strip().lower())
        user = session.exec(stmt).first()

        if user and AuthManager.verify_password(password, user.hashed_password):
            return user
        return None

    @staticmethod
    def create_user(
        session: Session,
        username: str,
        email: str,
        password: str,
        starting_balance: Decimal = Decimal("10000"),
        currency: str = "USD",
    ) -> tuple:
        """Create new user and their trading account. Returns (success, message)."""
        username = username.strip()
        email = email.strip().lower()

        if not username or not email or not password:
            return False, "Missing required fields"

        stmt = select(User).where(User.username == username)
        if session.exec(stmt).first():
            return False, "Username already exists"

        stmt = select(User).where(User.email == email)
        if session.exec(stmt).first():
            return False, "Email already exists"

        user = User(
            username=username,
            email=email,
            hashed_password=AuthManager.hash_password(password),
        )
        session.add(user)
        session.flush()

        session.add(Account(user_id=user.id, balance=starting_balance, currency=currency))
        session.commit()

        logger.info("Registered user %s with starting balance %s %s", username, starting_balance, currency)
        return True, "User created successfully"

    @staticmethod
    def get_account_for_user(session: Session, user_id: str) -> Optional[Account]:
        """The user's trading account (one per user)."""
        stmt = select(Account).where(Account.user_id == user_id).order_by(Account.created_at)
        return session.exec(stmt).first()
