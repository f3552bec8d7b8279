"""Pydantic models for notes, templates and their partial updates."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

_ENTITY_CONFIG = ConfigDict(frozen=True, populate_by_name=True)


def _unique_tags(tags: list[str] | tuple[str, ...]) -> tuple[str, ...]:
    """Drop duplicate tags, keeping the first occurrence."""
    return tuple(dict.fromkeys(tags))


class Note(BaseModel):
    """A single note inside a category."""

    model_config = _ENTITY_CONFIG

    id: str
    title: str = Field(..., description="Note title")
    content: str = Field(..., description="Note body")
    created_at: str = Field(..., alias="createdAt", description="ISO-8601 creation timestamp")
    updated_at: str | None = Field(
        default=None, alias="updatedAt", description="ISO-8601 last update timestamp"
    )


class Template(BaseModel):
    """A reusable text template with tags."""

    model_config = _ENTITY_CONFIG

    id: str
    title: str
    description: str = ""
    tags: tuple[str, ...] = Field(default_factory=tuple, description="Ordered, unique tags")
    content: str
    created_at: str = Field(..., alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")

    @field_validator("tags", mode="before")
    @classmethod
    def _dedupe_tags(cls, value: object) -> object:
        if value is None:
            return ()
        if isinstance(value, (list, tuple)):
            return _unique_tags(value)
        return value


class NoteUpdate(BaseModel):
    """Fields of a note that may be changed after creation."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    content: str | None = None


class TemplateUpdate(BaseModel):
    """Fields of a template that may be changed after creation."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    description: str | None = None
    tags: tuple[str, ...] | None = None
    content: str | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _dedupe_tags(cls, value: object) -> object:
        if isinstance(value, (list, tuple)):
            return _unique_tags(value)
        return value


class CategorySummary(BaseModel):
    """Name of a category and how many notes it holds."""

    model_config = ConfigDict(frozen=True)

    name: str
    count: int


class TemplateBundle(BaseModel):
    """Envelope used by the bundled template dataset and by exports."""

    templates: list[Template] = Field(default_factory=list)


NoteCollection = dict[str, list[Note]]

NOTES_ADAPTER: TypeAdapter[NoteCollection] = TypeAdapter(NoteCollection)
TEMPLATES_ADAPTER: TypeAdapter[list[Template]] = TypeAdapter(list[Template])
