import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

import models
from comments import CommentRepository
from errors import NotFound, PreconditionFailed

logger = logging.getLogger(__name__)

DELETE_WINDOW = timedelta(hours=24)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _describe(window: timedelta) -> str:
    seconds = int(window.total_seconds())
    if seconds % 3600 == 0:
        hours = seconds // 3600
        return f"{hours} hour" if hours == 1 else f"{hours} hours"
    return f"{seconds} seconds"


class CommentService:
    """A comment can be deleted only within the window after its creation."""

    def __init__(
        self,
        comments: CommentRepository,
        clock: Callable[[], datetime] = models.utc_now,
        window: timedelta = DELETE_WINDOW,
    ):
        self.comments = comments
        self.clock = clock
        self.window = window

    def delete(self, book_id: int, comment_id: int) -> None:
        """Delete a comment if it is still inside the deletion window.

        Raises ``NotFound`` when the comment does not exist under
        ``book_id`` and ``PreconditionFailed`` when its age is unknown or
        exceeds the window. ``StorageError`` from the repository propagates.
        """
        comment = self.comments.find_by_id(book_id, comment_id)
        if comment is None:
            raise NotFound("the comment was not found")

        if comment.created_at is None:
            raise PreconditionFailed("time of creation is unknown")

        elapsed = _as_utc(self.clock()) - _as_utc(comment.created_at)
        if int(elapsed.total_seconds()) > int(self.window.total_seconds()):
            logger.warning(
                f"Refusing to delete comment {comment_id} of book {book_id}: "
                f"created {elapsed} ago"
            )
            raise PreconditionFailed(
                f"comment older than {_describe(self.window)}, cannot delete"
            )

        if not self.comments.delete(book_id, comment_id):
            # Removed by a concurrent request between lookup and delete
            raise NotFound("the comment was not found")

        logger.info(f"Deleted comment {comment_id} of book {book_id}")
