"""Tests for step mutations and the last-step guard."""

import pytest

from form_drafts.adapters.memory import MemoryAdapter
from form_drafts.builder import FormBuilder
from form_drafts.errors import InvalidStateError, NotFoundError
from form_drafts.structure.store import StructureStore


class TestAddStep:
    @pytest.mark.asyncio
    async def test_create_form_has_first_step(self, builder: FormBuilder) -> None:
        form = await builder.create_form("Contact")

        view = await builder.get_working_view(form.id)

        assert [s.title for s in view.steps] == ["Step 1"]
        assert view.steps[0].is_draft is True
        assert view.steps[0].step_order == 0

    @pytest.mark.asyncio
    async def test_defaults_follow_existing_steps(self, builder: FormBuilder) -> None:
        form = await builder.create_form("Contact")

        step = await builder.add_step(form.id)

        assert step.title == "Step 2"
        assert step.step_order == 1
        assert step.is_draft is True
        assert step.draft_parent_id is None

    @pytest.mark.asyncio
    async def test_missing_form(self, builder: FormBuilder) -> None:
        with pytest.raises(NotFoundError):
            await builder.add_step("no-such-form")


class TestUpdateStep:
    """Renames and reorders apply in place, even on published steps."""

    @pytest.mark.asyncio
    async def test_rename_published_step_in_place(
        self, builder: FormBuilder, adapter: MemoryAdapter, make_published
    ) -> None:
        form, step, _ = await make_published()

        renamed = await builder.mutate_step(form.id, step.id, {"title": "About you"})

        assert renamed.id == step.id
        assert renamed.title == "About you"
        assert renamed.is_draft is False
        assert len(adapter.rows("form_steps")) == 1

    @pytest.mark.asyncio
    async def test_unknown_key_rejected(self, builder: FormBuilder, make_published) -> None:
        form, step, _ = await make_published()

        with pytest.raises(InvalidStateError):
            await builder.mutate_step(form.id, step.id, {"colour": "red"})

    @pytest.mark.asyncio
    async def test_step_of_other_form(self, builder: FormBuilder, make_published) -> None:
        _, step, _ = await make_published()
        other = await builder.create_form("Other")

        with pytest.raises(NotFoundError):
            await builder.mutate_step(other.id, step.id, {"title": "x"})


class TestDeleteStep:
    @pytest.mark.asyncio
    async def test_last_step_guard(
        self, builder: FormBuilder, adapter: MemoryAdapter, make_published
    ) -> None:
        form, step, _ = await make_published()
        before = adapter.rows("form_steps")

        with pytest.raises(InvalidStateError, match="last step"):
            await builder.delete_step(form.id, step.id)

        assert adapter.rows("form_steps") == before

    @pytest.mark.asyncio
    async def test_guard_counts_only_live_steps(
        self, builder: FormBuilder, make_published
    ) -> None:
        form, step, _ = await make_published()
        second = await builder.add_step(form.id)
        await builder.publish(form.id)
        await builder.delete_step(form.id, second.id)

        with pytest.raises(InvalidStateError):
            await builder.delete_step(form.id, step.id)

    @pytest.mark.asyncio
    async def test_guard_runs_before_lookup(self, builder: FormBuilder) -> None:
        form = await builder.create_form("Contact")

        with pytest.raises(InvalidStateError):
            await builder.delete_step(form.id, "no-such-step")

    @pytest.mark.asyncio
    async def test_draft_step_cascades(
        self, builder: FormBuilder, store: StructureStore, make_published
    ) -> None:
        form, _, _ = await make_published()
        draft = await builder.add_step(form.id, "Extra")
        field = await builder.add_field(form.id, draft.id, "text")

        result = await builder.delete_step(form.id, draft.id)

        assert result.deleted is True
        with pytest.raises(NotFoundError):
            await store.get_step(draft.id)
        with pytest.raises(NotFoundError):
            await store.get_field(field.id)

    @pytest.mark.asyncio
    async def test_published_step_is_staged(
        self, builder: FormBuilder, store: StructureStore, make_published
    ) -> None:
        form, step, (field,) = await make_published()
        await builder.add_step(form.id)

        result = await builder.delete_step(form.id, step.id)

        assert result.deleted is False
        assert result.step.pending_delete is True
        kept = await store.get_field(field.id)
        assert kept.pending_delete is False
        view = await builder.get_working_view(form.id)
        assert step.id in [s.id for s in view.steps]

    @pytest.mark.asyncio
    async def test_restore_step(self, builder: FormBuilder, make_published) -> None:
        form, step, _ = await make_published()
        await builder.add_step(form.id)
        await builder.delete_step(form.id, step.id)

        restored = await builder.restore_step(form.id, step.id)

        assert restored.pending_delete is False
