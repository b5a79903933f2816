import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from bookshelf.crud.base import CRUDBase
from bookshelf.models.book import Book, BookStatus
from bookshelf.schemas.book import BookCreate, BookUpdate

logger = logging.getLogger(__name__)


class CRUDBook(CRUDBase[Book, BookCreate, BookUpdate]):
    def create_for_user(self, db: Session, *, obj_in: BookCreate, user_id: int) -> Book:
        obj_in_data = obj_in.model_dump()
        if obj_in_data.get("date_added") is None:
            obj_in_data["date_added"] = datetime.now(timezone.utc)

        db_obj = self.model(**obj_in_data, user_id=user_id)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        logger.info(f"Book created: '{db_obj.title}' (ID: {db_obj.id}) for user {user_id}")
        return db_obj

    def _user_query(
        self,
        db: Session,
        user_id: int,
        status: Optional[BookStatus] = None,
        genre: Optional[str] = None,
    ):
        query = db.query(Book).filter(Book.user_id == user_id)

        if status:
            query = query.filter(Book.status == status)

        if genre:
            query = query.filter(Book.genre == genre)

        return query

    def get_by_user(
        self,
        db: Session,
        *,
        user_id: int,
        status: Optional[BookStatus] = None,
        genre: Optional[str] = None,
        skip: int = 0,
        limit: int = 10000,
    ) -> List[Book]:
        query = self._user_query(db, user_id, status, genre)
        return (
            query.order_by(Book.date_added.desc(), Book.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_by_user(
        self,
        db: Session,
        *,
        user_id: int,
        status: Optional[BookStatus] = None,
        genre: Optional[str] = None,
    ) -> int:
        return self._user_query(db, user_id, status, genre).count()


crud_book = CRUDBook(Book)
