"""Tests for slug derivation and allocation."""

import re
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from form_drafts.config.models import SlugSettings
from form_drafts.slugs import allocate_slug, generate_slug, random_suffix, slug_prefix


class TestSlugPrefix:
    @pytest.mark.parametrize(
        "title, expected",
        [
            ("Contact Us", "contact-us"),
            ("  Hello,  World -- 2024 ", "hello-world-2024"),
            ("Café & Bar!", "caf-bar"),
            ("---lead and trail---", "lead-and-trail"),
            ("!!!", "form"),
            ("", "form"),
        ],
    )
    def test_normalization(self, title: str, expected: str) -> None:
        assert slug_prefix(title) == expected

    def test_truncated_without_trailing_hyphen(self) -> None:
        settings = SlugSettings(max_prefix_length=6)

        assert slug_prefix("Hello world", settings) == "hello"

    def test_custom_fallback(self) -> None:
        assert slug_prefix("???", SlugSettings(fallback="survey")) == "survey"


class TestGenerateSlug:
    def test_suffix_shape(self) -> None:
        slug = generate_slug("Contact Us")

        assert re.fullmatch(r"contact-us-[a-z0-9]{6}", slug)

    def test_suffix_uses_alphabet(self) -> None:
        settings = SlugSettings(alphabet="xy", suffix_length=10)

        assert set(random_suffix(settings)) <= {"x", "y"}
        assert len(random_suffix(settings)) == 10


class TestAllocateSlug:
    @pytest.mark.asyncio
    async def test_free_candidate_is_used(self) -> None:
        store = MagicMock()
        store.slug_exists = AsyncMock(return_value=False)

        with patch("form_drafts.slugs.generate_slug", return_value="contact-aaaaaa"):
            slug = await allocate_slug(store, "Contact")

        assert slug == "contact-aaaaaa"
        store.slug_exists.assert_awaited_once_with("contact-aaaaaa")

    @pytest.mark.asyncio
    async def test_collision_draws_once_more(self, caplog: pytest.LogCaptureFixture) -> None:
        store = MagicMock()
        store.slug_exists = AsyncMock(return_value=True)

        with patch(
            "form_drafts.slugs.generate_slug",
            side_effect=["contact-aaaaaa", "contact-bbbbbb"],
        ):
            slug = await allocate_slug(store, "Contact")

        assert slug == "contact-bbbbbb"
        assert store.slug_exists.await_count == 1
        assert "collision" in caplog.text
