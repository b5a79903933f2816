import logging
from typing import Optional

from sqlalchemy.orm import Session

from bookshelf.core.auth import get_password_hash, verify_password
from bookshelf.crud.base import CRUDBase
from bookshelf.models.user import User
from bookshelf.schemas.user import UserCreate

logger = logging.getLogger(__name__)


class CRUDUser(CRUDBase[User, UserCreate, UserCreate]):
    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    def get_by_username(self, db: Session, *, username: str) -> Optional[User]:
        return db.query(User).filter(User.username == username).first()

    def create(self, db: Session, *, obj_in: UserCreate) -> User:
        db_obj = User(
            email=obj_in.email,
            username=obj_in.username,
            full_name=obj_in.full_name,
            hashed_password=get_password_hash(obj_in.password),
            is_active=obj_in.is_active,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        logger.info(f"User created: {db_obj.username} (ID: {db_obj.id})")
        return db_obj

    def authenticate(self, db: Session, *, login: str, password: str) -> Optional[User]:
        """Authenticate by email, falling back to username."""
        user = self.get_by_email(db, email=login) or self.get_by_username(
            db, username=login
        )
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    def is_active(self, user: User) -> bool:
        return user.is_active


crud_user = CRUDUser(User)
