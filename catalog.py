import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

import models, schemas
from database import ilike_contains, storage_errors
from errors import InvalidArgument
from pagination import Page, PageRequest

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "id": models.Book.id,
    "title": models.Book.title,
    "author": models.Book.author,
    "pub_year": models.Book.pub_year,
}


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


class CatalogRepository:
    def __init__(self, db: Session):
        self.db = db

    def search(self, query: Optional[str], page_request: PageRequest) -> Page[schemas.BookOut]:
        """Return one page of books, optionally filtered by title/author.

        A blank query matches every book. The total is counted over the
        same filtered query the page is fetched from.
        """
        q = self.db.query(models.Book)
        needle = _clean(query)
        if needle:
            q = q.filter(
                or_(
                    ilike_contains(models.Book.title, needle),
                    ilike_contains(models.Book.author, needle),
                )
            )

        key = page_request.sort_key(SORT_COLUMNS)
        order = []
        if key:
            column = SORT_COLUMNS[key]
            order.append(column.asc() if page_request.ascending else column.desc())
        if key != "id":
            order.append(models.Book.id.asc())

        with storage_errors(self.db, "search books"):
            total = q.count()
            rows = q.order_by(*order).offset(page_request.offset).limit(page_request.size).all()

        return Page[schemas.BookOut](
            items=[schemas.BookOut.model_validate(row) for row in rows],
            total=total,
            page=page_request.page,
            size=page_request.size,
        )

    def find_by_id(self, book_id: int) -> Optional[schemas.BookOut]:
        with storage_errors(self.db, "load book"):
            book = self.db.get(models.Book, book_id)
        if book is None:
            return None
        return schemas.BookOut.model_validate(book)

    def exists(self, book_id: int) -> bool:
        with storage_errors(self.db, "load book"):
            return (
                self.db.query(models.Book.id).filter(models.Book.id == book_id).first()
                is not None
            )

    def add(self, title: Optional[str], author: Optional[str], pub_year: Optional[int]) -> schemas.BookOut:
        title, author = _clean(title), _clean(author)
        if not title or not author:
            raise InvalidArgument("title & author required")
        if not isinstance(pub_year, int) or isinstance(pub_year, bool) or pub_year <= 0:
            raise InvalidArgument("invalid pub_year")

        new_book = models.Book(title=title, author=author, pub_year=pub_year)
        with storage_errors(self.db, "save book"):
            self.db.add(new_book)
            self.db.commit()
            self.db.refresh(new_book)

        logger.info(f"Added book {new_book.id}: {title!r} by {author!r}")
        return schemas.BookOut.model_validate(new_book)
