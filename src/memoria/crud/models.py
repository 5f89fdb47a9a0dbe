"""Database table definitions for stored documents"""

from datetime import datetime, timezone
from typing import List
from uuid import UUID, uuid4

from sqlalchemy import JSON, BigInteger, Column, DateTime, String, Text, UniqueConstraint
from sqlmodel import Field, SQLModel

from memoria.core.models import SearchableDocument


class Document(SQLModel, table=True):
    """A markdown document owned by a single caller"""
    __tablename__ = "documents"
    __table_args__ = (UniqueConstraint("owner_id", "path", name="uq_documents_owner_path"),)
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    owner_id: str = Field(..., index=True, nullable=False)
    path: str = Field(..., sa_column=Column(Text, nullable=False))
    title: str = Field(..., sa_column=Column(Text, nullable=False))
    body: str = Field(..., sa_column=Column(Text, nullable=False))
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    slug: str = Field(..., index=True, nullable=False)
    suffix: str = Field(..., sa_column=Column(String(16), nullable=False, index=True))
    status: str = Field(default="draft", nullable=False)
    updated: int = Field(..., sa_column=Column(BigInteger, nullable=False, index=True))
    size_bytes: int = Field(..., nullable=False)
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    revision_token: str = Field(default_factory=lambda: uuid4().hex, sa_column=Column(String(32), nullable=False))
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    @property
    def compound_slug(self) -> str:
        return f"{self.slug}-{self.suffix}"

    def to_searchable(self) -> SearchableDocument:
        """Read-only view handed to the ranker."""
        return SearchableDocument(
            id=self.id,
            slug=self.slug,
            suffix=self.suffix,
            title=self.title,
            tags=list(self.tags or []),
            updated=self.updated,
            size_bytes=self.size_bytes,
        )
