import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.orm import Session

import models, schemas
from database import ilike_contains, storage_errors
from errors import InvalidArgument
from pagination import Page, PageRequest

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "id": models.Comment.id,
    "author": models.Comment.author,
    "created_at": models.Comment.created_at,
}


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


class CommentRepository:
    def __init__(self, db: Session, clock: Callable[[], datetime] = models.utc_now):
        self.db = db
        self.clock = clock

    def _scoped(self, book_id: int):
        return self.db.query(models.Comment).filter(models.Comment.book_id == book_id)

    def list(
        self,
        book_id: int,
        author: Optional[str] = None,
        text: Optional[str] = None,
        page_request: Optional[PageRequest] = None,
    ) -> Page[schemas.CommentOut]:
        """Return one page of comments for ``book_id``, oldest first by default."""
        page_request = page_request or PageRequest()
        q = self._scoped(book_id)
        if _clean(author):
            q = q.filter(ilike_contains(models.Comment.author, _clean(author)))
        if _clean(text):
            q = q.filter(ilike_contains(models.Comment.text, _clean(text)))

        key = page_request.sort_key(SORT_COLUMNS) or "created_at"
        column = SORT_COLUMNS[key]
        order = [column.asc() if page_request.ascending else column.desc()]
        if key != "id":
            order.append(models.Comment.id.asc())

        with storage_errors(self.db, "list comments"):
            total = q.count()
            rows = q.order_by(*order).offset(page_request.offset).limit(page_request.size).all()

        return Page[schemas.CommentOut](
            items=[schemas.CommentOut.model_validate(row) for row in rows],
            total=total,
            page=page_request.page,
            size=page_request.size,
        )

    def find_by_id(self, book_id: int, comment_id: int) -> Optional[schemas.CommentOut]:
        with storage_errors(self.db, "load comment"):
            comment = self._scoped(book_id).filter(models.Comment.id == comment_id).first()
        if comment is None:
            return None
        return schemas.CommentOut.model_validate(comment)

    def add(self, book_id: int, author: Optional[str], text: Optional[str]) -> schemas.CommentOut:
        author, text = _clean(author), _clean(text)
        if not author or not text:
            raise InvalidArgument("author & text required")

        with storage_errors(self.db, "save comment"):
            book_exists = (
                self.db.query(models.Book.id).filter(models.Book.id == book_id).first()
                is not None
            )
            if not book_exists:
                raise InvalidArgument(f"book {book_id} does not exist")

            new_comment = models.Comment(
                book_id=book_id,
                author=author,
                text=text,
                created_at=self.clock(),
            )
            self.db.add(new_comment)
            self.db.commit()
            self.db.refresh(new_comment)

        logger.info(f"Added comment {new_comment.id} to book {book_id}")
        return schemas.CommentOut.model_validate(new_comment)

    def delete(self, book_id: int, comment_id: int) -> bool:
        """Delete a comment of ``book_id``; ``False`` when nothing matched."""
        with storage_errors(self.db, "delete comment"):
            deleted = (
                self._scoped(book_id)
                .filter(models.Comment.id == comment_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        return deleted > 0
