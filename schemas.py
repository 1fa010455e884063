from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Books
class BookCreate(BaseModel):
    title: str = Field(max_length=255)
    author: str = Field(max_length=255)
    pub_year: int


class BookOut(BaseModel):
    id: int
    title: str
    author: str
    pub_year: int

    model_config = ConfigDict(from_attributes=True)


# Comments
class CommentCreate(BaseModel):
    author: str = Field(max_length=255)
    text: str = Field(max_length=5000)


class CommentOut(BaseModel):
    id: int
    book_id: int
    author: str
    text: str
    created_at: datetime | None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        # SQLite hands timestamps back without tzinfo
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class PaginationMeta(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int


class BookListResponse(BaseModel):
    items: list[BookOut]
    meta: PaginationMeta


class CommentListResponse(BaseModel):
    items: list[CommentOut]
    meta: PaginationMeta
