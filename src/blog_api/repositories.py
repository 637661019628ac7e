# Repository pattern for data access
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from blog_api.models import Blog, Comment, User


class UserRepository:
    """Data access layer for users"""

    def __init__(self, db: Session):
        self.db = db

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def create_user(self, user_data: dict) -> User:
        user = User(**user_data)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user


class BlogRepository:
    """Data access layer for blogs"""

    def __init__(self, db: Session):
        self.db = db

    def get_blog_by_id(self, blog_id: str) -> Optional[Blog]:
        return self.db.query(Blog).filter(Blog.id == blog_id).first()

    def get_blog_with_author(self, blog_id: str) -> Optional[Blog]:
        return (
            self.db.query(Blog)
            .options(joinedload(Blog.author))
            .filter(Blog.id == blog_id)
            .first()
        )

    def get_blogs(self) -> List[Blog]:
        return self.db.query(Blog).all()

    def create_blog(self, blog_data: dict) -> Blog:
        blog = Blog(**blog_data)
        self.db.add(blog)
        self.db.commit()
        self.db.refresh(blog)
        return blog

    def update_blog(self, blog_id: str, update_data: dict) -> int:
        """Apply update_data to one blog in a single statement"""
        updated = (
            self.db.query(Blog)
            .filter(Blog.id == blog_id)
            .update(update_data, synchronize_session="fetch")
        )
        self.db.commit()
        return updated

    def delete_blog(self, blog: Blog, commit: bool = True) -> None:
        self.db.delete(blog)
        if commit:
            self.db.commit()


class CommentRepository:
    """Data access layer for comments"""

    def __init__(self, db: Session):
        self.db = db

    def delete_comments_for_blog(self, blog_id: str, commit: bool = True) -> int:
        deleted = (
            self.db.query(Comment)
            .filter(Comment.blog_id == blog_id)
            .delete(synchronize_session=False)
        )
        if commit:
            self.db.commit()
        return deleted
