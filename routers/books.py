from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

import schemas
from catalog import CatalogRepository
from config import settings
from database import get_db
from errors import NotFound
from pagination import Page, PageRequest

router = APIRouter(prefix="/api/books", tags=["books"])


def get_catalog(db: Session = Depends(get_db)) -> CatalogRepository:
    return CatalogRepository(db)


def page_request_from_query(
    page: int = Query(default=0),
    size: int | None = Query(default=None),
    sort: str | None = Query(default=None),
    order: str = Query(default="asc", pattern="^(asc|desc)$"),
) -> PageRequest:
    # Out-of-range page/size are normalized, not rejected
    return PageRequest.of(
        page=page,
        size=size,
        sort=sort,
        ascending=order == "asc",
        max_size=settings.MAX_PAGE_SIZE,
        default_size=settings.DEFAULT_PAGE_SIZE,
    )


def pagination_meta(result: Page) -> schemas.PaginationMeta:
    return schemas.PaginationMeta(
        page=result.page,
        page_size=result.size,
        total=result.total,
        total_pages=max(1, result.total_pages),
    )


# Add Book
@router.post("", response_model=schemas.BookOut, status_code=status.HTTP_201_CREATED)
def add_book(
    book: schemas.BookCreate,
    catalog: CatalogRepository = Depends(get_catalog),
):
    return catalog.add(book.title, book.author, book.pub_year)


# Get Books
@router.get("", response_model=schemas.BookListResponse)
def get_books(
    q: str | None = Query(default=None, description="Search in title or author"),
    page_request: PageRequest = Depends(page_request_from_query),
    catalog: CatalogRepository = Depends(get_catalog),
):
    result = catalog.search(q, page_request)
    return {"items": result.items, "meta": pagination_meta(result)}


@router.get("/{book_id}", response_model=schemas.BookOut)
def get_book(
    book_id: int,
    catalog: CatalogRepository = Depends(get_catalog),
):
    book = catalog.find_by_id(book_id)
    if book is None:
        raise NotFound("book not found")
    return book
