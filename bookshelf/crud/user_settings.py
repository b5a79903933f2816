import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookshelf.core.config import settings
from bookshelf.crud.base import CRUDBase
from bookshelf.models.user_settings import DEFAULT_PREFERENCES, UserSettings
from bookshelf.schemas.user_settings import UserSettingsUpdate

logger = logging.getLogger(__name__)


class CRUDUserSettings(CRUDBase[UserSettings, UserSettingsUpdate, UserSettingsUpdate]):
    def get_by_user(self, db: Session, *, user_id: int):
        return db.query(UserSettings).filter(UserSettings.user_id == user_id).first()

    def get_or_create(self, db: Session, *, user_id: int) -> UserSettings:
        """Return the user's settings, creating the defaults on first access."""
        existing = self.get_by_user(db, user_id=user_id)
        if existing:
            return existing

        db_obj = UserSettings(
            user_id=user_id,
            yearly_goal=settings.DEFAULT_YEARLY_GOAL,
            preferences=dict(DEFAULT_PREFERENCES),
        )
        db.add(db_obj)
        try:
            db.commit()
        except IntegrityError:
            # Created concurrently by another request
            db.rollback()
            return self.get_by_user(db, user_id=user_id)
        db.refresh(db_obj)
        logger.info(f"Default settings created for user {user_id}")
        return db_obj

    def update_for_user(
        self, db: Session, *, user_id: int, obj_in: UserSettingsUpdate
    ) -> UserSettings:
        """Partial update: goal replaced when given, preference keys merged."""
        db_obj = self.get_or_create(db, user_id=user_id)

        if obj_in.yearly_goal is not None:
            db_obj.yearly_goal = obj_in.yearly_goal

        if obj_in.preferences is not None:
            incoming = obj_in.preferences.model_dump(exclude_unset=True)
            # Assign a new dict so the JSON column is flagged dirty
            db_obj.preferences = {**(db_obj.preferences or {}), **incoming}

        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        logger.info(f"Settings updated for user {user_id}")
        return db_obj


crud_user_settings = CRUDUserSettings(UserSettings)
