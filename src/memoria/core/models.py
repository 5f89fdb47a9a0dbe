"""Read-only views and value objects shared by the ranker and frontmatter validator"""

from typing import Any, Literal

from pydantic import BaseModel, Field


SortOrder = Literal["relevance", "recency"]

# Values a frontmatter key may hold after scalar coercion.
Scalar = str | int | float | bool | None
ParsedFrontmatter = dict[str, Scalar | list[Scalar]]


class SearchableDocument(BaseModel):
    """The fields of a stored document the ranker reads. Never mutated."""
    id: Any
    slug: str
    suffix: str = ""                # empty when slug is already the full handle
    title: str
    tags: list[str] = Field(default_factory=list)
    updated: int                    # ms since epoch, set by the write path
    size_bytes: int = 0

    @property
    def compound_slug(self) -> str:
        return f"{self.slug}-{self.suffix}" if self.suffix else self.slug


class RankedResult(BaseModel):
    """One search hit as returned to callers (score already stripped)."""
    id: Any
    compound_slug: str
    title: str
    updated: int
    size_bytes: int


class ValidatedFrontmatter(BaseModel):
    """Normalized projection of a parsed frontmatter block merged into a document."""
    title: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)
    status: str = "draft"
    updated: int | float
