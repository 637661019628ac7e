# Database models
from sqlalchemy import Column, DateTime, String, Text, func
from sqlalchemy.orm import relationship

from blog_api.database import Base, generate_object_id


class User(Base):
    __tablename__ = "users"

    id = Column(String(24), primary_key=True, default=generate_object_id)
    name = Column(String(100), nullable=False)
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    blogs = relationship(
        "Blog", primaryjoin="foreign(Blog.author_id) == User.id", back_populates="author"
    )


class Blog(Base):
    __tablename__ = "blogs"

    id = Column(String(24), primary_key=True, default=generate_object_id)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    # Reference only, no constraint: the author does not have to exist yet
    author_id = Column(String(24), nullable=False, index=True)
    photo_path = Column(String(500), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    author = relationship(
        "User", primaryjoin="foreign(Blog.author_id) == User.id", back_populates="blogs"
    )


class Comment(Base):
    __tablename__ = "comments"

    id = Column(String(24), primary_key=True, default=generate_object_id)
    content = Column(Text, nullable=False)
    blog_id = Column("blog", String(24), nullable=False, index=True)
    author_id = Column(String(24), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
