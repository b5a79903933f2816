import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from bookshelf.core.auth import get_current_user
from bookshelf.core.database import get_db
from bookshelf.core.exceptions import BookNotFound, NotBookOwner
from bookshelf.crud.book import crud_book
from bookshelf.models.book import Book, BookStatus
from bookshelf.models.user import User
from bookshelf.schemas.book import BookCreate, BookResponse, BookUpdate
from bookshelf.schemas.response import (
    CreateResponse,
    DeleteResponse,
    ListResponse,
    Messages,
    SuccessResponse,
    UpdateResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_owned_book(db: Session, book_id: int, user: User) -> Book:
    book = crud_book.get(db, id=book_id)
    if not book:
        raise BookNotFound(book_id)
    if book.user_id != user.id:
        logger.warning(f"User {user.id} tried to access book {book_id}")
        raise NotBookOwner()
    return book


@router.get("/", response_model=ListResponse[BookResponse])
def read_books(
    db: Session = Depends(get_db),
    skip: int = 0,
    limit: int = Query(default=10000, le=10000),
    book_status: Optional[BookStatus] = Query(
        None, alias="status", description="Filter by status"
    ),
    genre: Optional[str] = Query(None, description="Filter by genre"),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Retrieve the current user's books, most recently added first.
    """
    books = crud_book.get_by_user(
        db,
        user_id=current_user.id,
        status=book_status,
        genre=genre,
        skip=skip,
        limit=limit,
    )
    total_count = crud_book.count_by_user(
        db, user_id=current_user.id, status=book_status, genre=genre
    )

    return ListResponse(
        message=Messages.BOOKS_RETRIEVED,
        data=[BookResponse.model_validate(book) for book in books],
        meta={"total": total_count, "skip": skip, "limit": limit},
    )


@router.post(
    "/",
    response_model=CreateResponse[BookResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_book(
    *,
    db: Session = Depends(get_db),
    book_in: BookCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Add a book to the current user's library.
    """
    book = crud_book.create_for_user(db, obj_in=book_in, user_id=current_user.id)
    return CreateResponse(
        message=Messages.BOOK_CREATED, data=BookResponse.model_validate(book)
    )


@router.get("/{book_id}", response_model=SuccessResponse[BookResponse])
def read_book(
    *,
    db: Session = Depends(get_db),
    book_id: int,
    current_user: User = Depends(get_current_user),
) -> Any:
    book = _get_owned_book(db, book_id, current_user)
    return SuccessResponse(
        message=Messages.DATA_RETRIEVED, data=BookResponse.model_validate(book)
    )


@router.put("/{book_id}", response_model=UpdateResponse[BookResponse])
def update_book(
    *,
    db: Session = Depends(get_db),
    book_id: int,
    book_in: BookUpdate,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Update a book. Only the fields sent are changed.
    """
    book = _get_owned_book(db, book_id, current_user)
    book = crud_book.update(db, db_obj=book, obj_in=book_in)
    logger.info(f"Book {book_id} updated by user {current_user.id}")
    return UpdateResponse(
        message=Messages.BOOK_UPDATED, data=BookResponse.model_validate(book)
    )


@router.delete("/{book_id}", response_model=DeleteResponse)
def delete_book(
    *,
    db: Session = Depends(get_db),
    book_id: int,
    current_user: User = Depends(get_current_user),
) -> Any:
    _get_owned_book(db, book_id, current_user)
    crud_book.remove(db, id=book_id)
    logger.info(f"Book {book_id} deleted by user {current_user.id}")
    return DeleteResponse(message=Messages.BOOK_DELETED)
