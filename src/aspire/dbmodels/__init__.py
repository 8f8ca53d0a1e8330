"""
Database models for Aspire (authoritative ORM definitions).

This module defines the SQLAlchemy Base with a naming convention for stable
Alembic autogenerate diffs, and exposes `target_metadata` for Alembic.

Parent/child links are kept as ordered JSON lists of id strings on the parent
rows (``Users.aspiration_ids``, ``Users.folder_ids``, ``Folders.aspiration_ids``).
Resolvers update those lists in the same session as the child row.
"""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKeyConstraint,
    Index,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..auth.passwords import hash_password, verify_password

# Naming convention for deterministic constraint/index names in Alembic diffs
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


class Users(Base):
    __tablename__ = "users"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="users_pkey"),
        UniqueConstraint("username", name="users_username_key"),
        UniqueConstraint("email", name="users_email_key"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    aspiration_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    folder_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow, onupdate=utcnow)

    def set_password(self, password: str) -> None:
        """Store a bcrypt hash of ``password``."""
        self.password = hash_password(password)

    def is_correct_password(self, password: str) -> bool:
        """Check ``password`` against the stored hash."""
        return verify_password(password, self.password)


class Folders(Base):
    __tablename__ = "folders"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="folders_pkey"),
        Index("idx_folders_username", "username"),
        Index("idx_folders_created_at", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    aspiration_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow, onupdate=utcnow)


class Aspirations(Base):
    __tablename__ = "aspirations"
    __table_args__ = (
        ForeignKeyConstraint(
            ["folder_id"],
            ["folders.id"],
            ondelete="CASCADE",
            name="aspirations_folder_id_fkey",
        ),
        PrimaryKeyConstraint("id", name="aspirations_pkey"),
        Index("idx_aspirations_username", "username"),
        Index("idx_aspirations_folder_id", "folder_id"),
        Index("idx_aspirations_created_at", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    folder_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow, onupdate=utcnow)


target_metadata = Base.metadata
