"""Shared fixtures: an in-memory structure store and builder facades."""

import pytest

from form_drafts.adapters.memory import MemoryAdapter
from form_drafts.builder import FormBuilder, PublicForms
from form_drafts.structure.store import StructureStore


@pytest.fixture
def adapter() -> MemoryAdapter:
    return MemoryAdapter()


@pytest.fixture
def store(adapter: MemoryAdapter) -> StructureStore:
    return StructureStore(adapter)


@pytest.fixture
def builder(store: StructureStore) -> FormBuilder:
    return FormBuilder(store)


@pytest.fixture
def public(store: StructureStore) -> PublicForms:
    return PublicForms(store)


@pytest.fixture
def make_published(builder: FormBuilder):
    """Factory for a published form with one step and one text field per label.

    Returns ``(form, step, fields)`` as they were before publishing; new
    drafts keep their ids when promoted.
    """

    async def _make(title: str = "Contact Us", labels: tuple[str, ...] = ("Name",)):
        form = await builder.create_form(title)
        view = await builder.get_working_view(form.id)
        step = view.steps[0]
        fields = [
            await builder.add_field(form.id, step.id, "text", label=label)
            for label in labels
        ]
        result = await builder.publish(form.id)
        return result.form, step, fields

    return _make
