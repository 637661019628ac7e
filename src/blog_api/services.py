"""
Blog lifecycle handling.

BlogService validates inbound blog requests, stores photo attachments and keeps
blog documents in the database in sync with them. Each operation returns an
OperationResult for success and for the expected "not found" outcome; failures
are raised as BlogAPIError subclasses and rendered by the error responder.
"""
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator

import structlog
from fastapi import Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blog_api.config import Settings, get_settings
from blog_api.database import get_db
from blog_api.errors import PersistenceError, StorageError
from blog_api.repositories import BlogRepository, CommentRepository
from blog_api.schemas import BlogCreate, BlogDetailsDTO, BlogDTO, BlogIdParams, BlogUpdate
from blog_api.storage import (
    BlobStorage,
    build_photo_path,
    decode_photo,
    filename_from_photo_path,
    generate_photo_filename,
    get_blob_storage,
)
from blog_api.validation import validate_payload

logger = structlog.get_logger(__name__)

BLOG_NOT_FOUND = "Blog not found"


@dataclass
class OperationResult:
    status_code: int
    body: dict


def not_found() -> OperationResult:
    return OperationResult(status.HTTP_404_NOT_FOUND, {"message": BLOG_NOT_FOUND})


class BlogService:
    """Business logic for blog operations"""

    def __init__(
        self,
        db: Session,
        storage: BlobStorage,
        server_base_path: str,
        validate: Callable[..., Any] = validate_payload,
    ):
        self.db = db
        self.blog_repo = BlogRepository(db)
        self.comment_repo = CommentRepository(db)
        self.storage = storage
        self.server_base_path = server_base_path
        self.validate = validate

    @contextmanager
    def _persistence(self) -> Iterator[None]:
        """Turn database failures into PersistenceError, rolling the session back"""
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceError() from exc

    async def _store_photo(self, filename: str, data: bytes) -> None:
        try:
            await self.storage.write(filename, data)
        except OSError as exc:
            raise StorageError(f"Could not write photo {filename}") from exc

    def _discard_photo(self, filename: str) -> None:
        """Remove a photo written for a change that was not committed"""
        try:
            self.storage.delete(filename)
        except (OSError, StorageError):
            logger.exception("photo_cleanup_failed", filename=filename)

    def _remove_previous_photo(self, filename: str) -> None:
        try:
            self.storage.delete(filename)
        except FileNotFoundError:
            logger.warning("previous_photo_missing", filename=filename)
        except StorageError:
            logger.exception("previous_photo_delete_failed", filename=filename)
            raise
        except OSError as exc:
            logger.exception("previous_photo_delete_failed", filename=filename)
            raise StorageError(f"Could not delete photo {filename}") from exc

    async def create(self, payload: Any) -> OperationResult:
        """Create a blog with its photo"""
        data = self.validate(BlogCreate, payload)
        photo = decode_photo(data.photo)

        filename = generate_photo_filename(data.author)
        await self._store_photo(filename, photo)

        try:
            with self._persistence():
                blog = self.blog_repo.create_blog({
                    "title": data.title,
                    "author_id": data.author,
                    "content": data.content,
                    "photo_path": build_photo_path(self.server_base_path, filename),
                })
        except PersistenceError:
            self._discard_photo(filename)
            raise

        logger.info("blog_created", blog_id=blog.id, author=blog.author_id, photo=filename)
        return OperationResult(status.HTTP_201_CREATED, {"blog": BlogDTO.from_blog(blog).to_json()})

    async def get_all(self) -> OperationResult:
        """List every blog, unfiltered and unpaginated"""
        with self._persistence():
            blogs = self.blog_repo.get_blogs()

        blogs_dto = [BlogDTO.from_blog(blog).to_json() for blog in blogs]
        return OperationResult(status.HTTP_200_OK, {"blogs": blogs_dto})

    async def get_by_id(self, blog_id: Any) -> OperationResult:
        """Get one blog with its author resolved"""
        params = self.validate(BlogIdParams, {"id": blog_id})

        with self._persistence():
            blog = self.blog_repo.get_blog_with_author(params.id)
        if blog is None:
            return not_found()

        return OperationResult(status.HTTP_200_OK, {"blog": BlogDetailsDTO.from_blog(blog).to_json()})

    async def update(self, payload: Any) -> OperationResult:
        """Update title and content, replacing the photo when a new one is supplied"""
        data = self.validate(BlogUpdate, payload)
        photo = decode_photo(data.photo) if data.photo else None

        with self._persistence():
            blog = self.blog_repo.get_blog_by_id(data.blog_id)
        if blog is None:
            return not_found()

        update_data = {"title": data.title, "content": data.content}

        if photo is None:
            with self._persistence():
                self.blog_repo.update_blog(data.blog_id, update_data)
            logger.info("blog_updated", blog_id=data.blog_id, photo_replaced=False)
            return OperationResult(status.HTTP_200_OK, {"message": "Blog updated"})

        previous_photo = filename_from_photo_path(blog.photo_path)
        filename = generate_photo_filename(data.author)
        await self._store_photo(filename, photo)
        update_data["photo_path"] = build_photo_path(self.server_base_path, filename)

        try:
            with self._persistence():
                self.blog_repo.update_blog(data.blog_id, update_data)
        except PersistenceError:
            self._discard_photo(filename)
            raise

        self._remove_previous_photo(previous_photo)
        logger.info("blog_updated", blog_id=data.blog_id, photo_replaced=True, photo=filename)
        return OperationResult(status.HTTP_200_OK, {"message": "Blog updated"})

    async def delete(self, blog_id: Any) -> OperationResult:
        """Delete a blog and every comment on it"""
        params = self.validate(BlogIdParams, {"id": blog_id})

        with self._persistence():
            blog = self.blog_repo.get_blog_by_id(params.id)
        if blog is None:
            return not_found()

        with self._persistence():
            self.blog_repo.delete_blog(blog, commit=False)
            comments_deleted = self.comment_repo.delete_comments_for_blog(params.id, commit=False)
            self.db.commit()

        logger.info("blog_deleted", blog_id=params.id, comments_deleted=comments_deleted)
        return OperationResult(status.HTTP_200_OK, {"message": "Blog deleted"})


def get_blog_service(
    db: Session = Depends(get_db),
    storage: BlobStorage = Depends(get_blob_storage),
    settings: Settings = Depends(get_settings),
) -> BlogService:
    """Blog service dependency"""
    return BlogService(db, storage, settings.backend_server_path)
