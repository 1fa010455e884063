from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

import schemas
from catalog import CatalogRepository
from comment_service import CommentService
from comments import CommentRepository
from database import get_db
from errors import NotFound
from pagination import PageRequest
from routers.books import get_catalog, page_request_from_query, pagination_meta

router = APIRouter(prefix="/api/books/{book_id}/comments", tags=["comments"])


def get_comments(db: Session = Depends(get_db)) -> CommentRepository:
    return CommentRepository(db)


def get_comment_service(
    comments: CommentRepository = Depends(get_comments),
) -> CommentService:
    return CommentService(comments)


@router.get("", response_model=schemas.CommentListResponse)
def list_comments(
    book_id: int,
    author: str | None = Query(default=None),
    text: str | None = Query(default=None),
    page_request: PageRequest = Depends(page_request_from_query),
    catalog: CatalogRepository = Depends(get_catalog),
    comments: CommentRepository = Depends(get_comments),
):
    if not catalog.exists(book_id):
        raise NotFound("book not found")

    result = comments.list(book_id, author, text, page_request)
    return {"items": result.items, "meta": pagination_meta(result)}


@router.post("", response_model=schemas.CommentOut, status_code=status.HTTP_201_CREATED)
def add_comment(
    book_id: int,
    comment: schemas.CommentCreate,
    comments: CommentRepository = Depends(get_comments),
):
    return comments.add(book_id, comment.author, comment.text)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
    book_id: int,
    comment_id: int,
    service: CommentService = Depends(get_comment_service),
):
    service.delete(book_id, comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
