# ============================================================================
# FILE: app/services/user_service.py
# Credential store: durable lookup and insertion of user records
# ============================================================================
from typing import Optional
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.core.errors import ConflictError
from app.db.models.user import User
import logging

logger = logging.getLogger(__name__)

class CredentialStore:
    """Storage access for user identity records, bound to one DB session"""

    def __init__(self, db: Session):
        self.db = db

    def find_by_username_or_email(self, username: str, email: str) -> Optional[User]:
        """Any user holding this username or this email"""
        return self.db.query(User).filter(
            or_(User.username == username, User.email == email)
        ).first()

    def find_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def insert(self, username: str, email: str, password_hash: str) -> User:
        """
        Insert a new user.
        A unique-constraint violation (e.g. a concurrent signup that won the
        race after our existence check) is reported as ConflictError.
        """
        user = User(username=username, email=email, password_hash=password_hash)
        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.info(f"Duplicate signup rejected by storage: {e.orig.__class__.__name__}")
            raise ConflictError() from e
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error creating user: {e}")
            raise
        self.db.refresh(user)
        logger.info(f"User created: id={user.id}")
        return user
