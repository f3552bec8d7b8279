"""Tests for notekeeper.models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from notekeeper.models import Note, NoteUpdate, Template, TemplateBundle, TemplateUpdate


class TestNoteModel:
    def test_accepts_json_and_python_names(self) -> None:
        a = Note(id="n", title="t", content="c", createdAt="2024-01-01")
        b = Note(id="n", title="t", content="c", created_at="2024-01-01")
        assert a == b
        assert a.updated_at is None

    def test_dump_uses_stored_names(self) -> None:
        note = Note(id="n", title="t", content="c", created_at="x", updated_at="y")
        assert note.model_dump(by_alias=True) == {
            "id": "n",
            "title": "t",
            "content": "c",
            "createdAt": "x",
            "updatedAt": "y",
        }

    def test_frozen(self) -> None:
        note = Note(id="n", title="t", content="c", created_at="x")
        with pytest.raises(ValidationError):
            note.content = "changed"


class TestTemplateModel:
    def test_missing_tags(self) -> None:
        template = Template(id="t", title="T", content="c", createdAt="x")
        assert template.tags == ()
        assert template.description == ""

    def test_null_tags(self) -> None:
        template = Template(id="t", title="T", content="c", createdAt="x", tags=None)
        assert template.tags == ()

    def test_tags_deduplicated_in_order(self) -> None:
        template = Template(id="t", title="T", content="c", createdAt="x", tags=["b", "a", "b"])
        assert template.tags == ("b", "a")

    def test_bundle(self) -> None:
        bundle = TemplateBundle.model_validate(
            {"templates": [{"id": "t", "title": "T", "content": "c", "createdAt": "x"}]}
        )
        assert bundle.templates[0].id == "t"


class TestUpdates:
    def test_note_update_forbids_extra(self) -> None:
        with pytest.raises(ValidationError):
            NoteUpdate.model_validate({"createdAt": "x"})

    def test_note_update_tracks_set_fields(self) -> None:
        update = NoteUpdate(content="new")
        assert update.model_dump(exclude_unset=True) == {"content": "new"}

    def test_template_update_dedupes_tags(self) -> None:
        assert TemplateUpdate(tags=["a", "a"]).tags == ("a",)

    def test_template_update_forbids_id(self) -> None:
        with pytest.raises(ValidationError):
            TemplateUpdate.model_validate({"id": "tmpl-1"})
