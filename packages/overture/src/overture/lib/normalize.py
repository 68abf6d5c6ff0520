"""Normalization of free-text track titles and artist names.

Catalog titles carry decorations ("(Remastered 2011)", "- Radio Edit",
"[Live]") that user requests usually lack. Normalizing both sides to the
same canonical form makes them comparable by edit distance.
"""

import re

# Tokens that mark a version/edition decoration rather than part of the name
NOISE_TOKENS = frozenset(
    {
        "clean",
        "deluxe",
        "edit",
        "edition",
        "explicit",
        "feat",
        "featuring",
        "ft",
        "live",
        "mix",
        "mono",
        "radio",
        "remaster",
        "remastered",
        "stereo",
        "version",
    }
)

_BRACKET_PAIRS = (("(", ")"), ("[", "]"))
_DASH_SEPARATOR = " - "
# Any run of characters that is not a letter or digit (unicode aware)
_SEPARATOR_RE = re.compile(r"[\W_]+")


def _tokens(value: str) -> list[str]:
    return _SEPARATOR_RE.sub(" ", value).split()


def has_noise_token(segment: str) -> bool:
    """Check whether a segment contains any noise token."""
    return any(token in NOISE_TOKENS for token in _tokens(segment.lower()))


def _trim_bracketed_suffix(value: str) -> str:
    for opening, closing in _BRACKET_PAIRS:
        if not value.endswith(closing):
            continue
        idx = value.rfind(opening)
        if idx != -1 and idx < len(value) - 1 and has_noise_token(value[idx + 1 : -1]):
            return value[:idx].strip()
    return value


def _trim_dash_suffix(value: str) -> str:
    idx = value.rfind(_DASH_SEPARATOR)
    if idx != -1 and has_noise_token(value[idx + len(_DASH_SEPARATOR) :]):
        return value[:idx].strip()
    return value


def strip_noise_suffixes(value: str) -> str:
    """Repeatedly strip trailing decorations that contain noise tokens.

    Handles stacked suffixes such as "Title (Live) (Remastered 2020)" and
    "Title - 2011 Remaster". Suffixes without noise tokens are kept.

    Args:
        value: Lowercased input.

    Returns:
        Input with all trailing noise decorations removed.
    """
    current = value.strip()
    while True:
        trimmed = _trim_dash_suffix(_trim_bracketed_suffix(current))
        if trimmed == current:
            return current
        current = trimmed


def normalize(value: str) -> str:
    """Produce the canonical comparable form of a title or artist.

    Steps: lowercase, strip noise suffixes, collapse non-alphanumeric runs
    to single spaces, drop remaining standalone noise tokens. Digits are
    kept ("Symphony No. 5" becomes "symphony no 5"). Idempotent.

    Args:
        value: Raw title or artist.

    Returns:
        Normalized string, or "" for blank input.
    """
    if not value or not value.strip():
        return ""
    stripped = strip_noise_suffixes(value.lower())
    return " ".join(t for t in _tokens(stripped) if t not in NOISE_TOKENS)


def normalize_or_raw(value: str) -> str:
    """Normalize, falling back to the trimmed raw value when nothing survives.

    Keeps legitimately short titles such as "Live" or "Mono" searchable.
    """
    return normalize(value) or value.strip()
