"""Tests for title and artist normalization."""

import pytest
from overture.lib.normalize import (
    NOISE_TOKENS,
    has_noise_token,
    normalize,
    normalize_or_raw,
    strip_noise_suffixes,
)


class TestNormalize:
    """Tests for normalize."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("Happy (Remastered 2014)", "happy"),
            ("Song - Radio Edit", "song"),
            ("Title (Live) (Remastered 2020)", "title"),
            ("Title - 2011 Remaster", "title"),
            ("Song [Explicit]", "song"),
            ("Symphony No. 5", "symphony no 5"),
            ("Pharrell Williams", "pharrell williams"),
            ("AC/DC", "ac dc"),
            ("Love (Acoustic)", "love acoustic"),
            ("Title - Part 2", "title part 2"),
            ("Song feat. Someone", "song someone"),
            ("  Spaced    Out  ", "spaced out"),
            ("Beyoncé", "beyoncé"),
        ],
    )
    def test_normalize(self, value: str, expected: str) -> None:
        """Should strip noise decorations and collapse separators."""
        assert normalize(value) == expected

    @pytest.mark.parametrize("value", ["", "   ", "\t\n"])
    def test_blank_input_returns_empty(self, value: str) -> None:
        """Blank or whitespace-only input should normalize to an empty string."""
        assert normalize(value) == ""

    @pytest.mark.parametrize(
        "value",
        [
            "Happy (Remastered 2014)",
            "Title (Live) (Remastered 2020)",
            "Symphony No. 5",
            "Don't Stop Me Now - 2011 Mix",
            "Hey Jude [Mono] - Remastered",
            "((weird)) -- input [x]",
            "Live",
        ],
    )
    def test_idempotent(self, value: str) -> None:
        """Normalizing twice should equal normalizing once."""
        once = normalize(value)
        assert normalize(once) == once

    def test_only_noise_normalizes_to_empty(self) -> None:
        """A title made only of noise tokens normalizes to nothing."""
        assert normalize("Live") == ""

    def test_keeps_digits(self) -> None:
        """Digits are part of the canonical form."""
        assert "5" in normalize("Symphony No. 5 (Live)")


class TestNormalizeOrRaw:
    """Tests for the raw-input fallback."""

    def test_falls_back_to_raw_when_empty(self) -> None:
        """Short noise-only titles should stay searchable."""
        assert normalize_or_raw(" Live ") == "Live"

    def test_uses_normalized_value(self) -> None:
        assert normalize_or_raw("Happy (Remastered 2014)") == "happy"


class TestStripNoiseSuffixes:
    """Tests for suffix stripping."""

    def test_keeps_suffix_without_noise(self) -> None:
        """Suffixes without noise tokens are part of the title."""
        assert strip_noise_suffixes("love (acoustic)") == "love (acoustic)"

    def test_strips_stacked_suffixes(self) -> None:
        value = "title - live (remastered 2020) [mono]"
        assert strip_noise_suffixes(value) == "title"

    def test_does_not_strip_leading_bracket(self) -> None:
        """A bracketed prefix is never treated as a suffix."""
        assert strip_noise_suffixes("(live) song") == "(live) song"


class TestHasNoiseToken:
    """Tests for noise token detection."""

    @pytest.mark.parametrize("token", sorted(NOISE_TOKENS))
    def test_every_noise_token_detected(self, token: str) -> None:
        assert has_noise_token(f"2011 {token.upper()}")

    def test_substring_is_not_a_token(self) -> None:
        """Only whole tokens count ("lively" is not "live")."""
        assert not has_noise_token("lively remix")
