# Pydantic models for request validation and response views
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"
PHOTO_PATTERN = r"^data:image/(png|jpg|jpeg);base64,"


class RequestSchema(BaseModel):
    """Inbound request shape: camelCase keys, unknown keys rejected"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class BlogCreate(RequestSchema):
    title: str = Field(..., min_length=1)
    author: str = Field(..., pattern=OBJECT_ID_PATTERN)
    content: str = Field(..., min_length=1)
    photo: str = Field(..., pattern=PHOTO_PATTERN, description="data:image/png;base64,... encoded photo")


class BlogUpdate(RequestSchema):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    author: str = Field(..., pattern=OBJECT_ID_PATTERN)
    blog_id: str = Field(..., pattern=OBJECT_ID_PATTERN)
    photo: Optional[str] = Field(None, pattern=PHOTO_PATTERN)

    @field_validator("photo", mode="before")
    @classmethod
    def photo_not_null(cls, value):
        # Omit the key to keep the current photo
        if value is None:
            raise ValueError("photo must be a data URI when present")
        return value


class BlogIdParams(RequestSchema):
    id: str = Field(..., pattern=OBJECT_ID_PATTERN)


class ResponseView(BaseModel):
    """Outbound projection, serialized with camelCase keys"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class BlogDTO(ResponseView):
    """List view: the author stays a raw reference"""

    id: str
    author: str
    title: str
    content: str
    photo_path: str

    @classmethod
    def from_blog(cls, blog) -> "BlogDTO":
        return cls(
            id=blog.id,
            author=blog.author_id,
            title=blog.title,
            content=blog.content,
            photo_path=blog.photo_path,
        )


class BlogDetailsDTO(ResponseView):
    """Detail view with the author resolved to user data"""

    id: str
    title: str
    content: str
    photo_path: str
    created_at: Optional[datetime] = None
    author_name: Optional[str] = None
    author_username: Optional[str] = None

    @classmethod
    def from_blog(cls, blog) -> "BlogDetailsDTO":
        author = blog.author
        return cls(
            id=blog.id,
            title=blog.title,
            content=blog.content,
            photo_path=blog.photo_path,
            created_at=blog.created_at,
            author_name=author.name if author else None,
            author_username=author.username if author else None,
        )
