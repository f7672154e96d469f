"""Tests for shared utility functions."""

from datetime import timezone

from booking_engine.utils import (
    normalize_phone,
    sanitize_email,
    sanitize_name,
    sanitize_notes,
    sanitize_phone,
    strip_markup,
    utc_now,
)


class TestNormalizePhone:
    def test_strips_punctuation(self):
        assert normalize_phone("(11) 98765-4321") == "11987654321"

    def test_preserves_leading_plus(self):
        assert normalize_phone("+55 11 98765-4321") == "+5511987654321"

    def test_strips_whitespace(self):
        assert normalize_phone("  11987654321  ") == "11987654321"


class TestStripMarkup:
    def test_removes_tags(self):
        assert strip_markup("<b>Oi</b> tudo bem") == "Oi tudo bem"

    def test_removes_event_handlers(self):
        assert "onclick" not in strip_markup('Oi onclick="steal()"')

    def test_removes_script_protocols(self):
        assert "javascript:" not in strip_markup("javascript:alert(1)")

    def test_empty(self):
        assert strip_markup("") == ""


class TestSanitizers:
    def test_name_keeps_accents(self):
        assert sanitize_name("  <b>Ana</b>  Souza 2 ") == "Ana Souza"
        assert sanitize_name("Mônica D'Ávila-Cruz") == "Mônica D'Ávila-Cruz"

    def test_phone_drops_letters(self):
        assert "ramal" not in sanitize_phone("(11) 9876-5432 ramal")

    def test_email_lowercased_and_compacted(self):
        assert sanitize_email(" Ana @Mail.COM ") == "ana@mail.com"
        assert sanitize_email("<ana@mail.com>") == "ana@mail.com"

    def test_notes_collapse_blank_lines(self):
        assert sanitize_notes("linha um\n\n\n\nlinha dois", 500) == "linha um\n\nlinha dois"

    def test_notes_truncated(self):
        assert len(sanitize_notes("x" * 50, 10)) == 10

    def test_notes_drop_markup(self):
        assert sanitize_notes("Chego <i>cedo</i>!", 500) == "Chego cedo!"


class TestUtcNow:
    def test_is_aware_utc(self):
        assert utc_now().tzinfo == timezone.utc
