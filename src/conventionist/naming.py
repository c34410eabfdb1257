"""Identifier casing and English inflection helpers shared by the rule catalogue."""

from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# Casing
# ---------------------------------------------------------------------------

_SNAKE_RE = re.compile(r"^[a-z][a-z0-9]*(?:_[a-z0-9]+)*$")
_KEBAB_RE = re.compile(r"^[a-z][a-z0-9]*(?:-[a-z0-9]+)*$")
_CAMEL_RE = re.compile(r"^[a-z][a-z0-9]*(?:[A-Z][a-z0-9]*)*$")
_PASCAL_RE = re.compile(r"^[A-Z][a-z0-9]*(?:[A-Z][a-z0-9]*)*$")

# Splits "HTTPServerError" -> HTTP, Server, Error and "userId2" -> user, Id2
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z]|[0-9]|\b|$)|[A-Z]?[a-z]+[0-9]*|[A-Z]+[0-9]*|[0-9]+")

CASING_STYLES: frozenset[str] = frozenset({"snake", "kebab", "camel", "pascal", "other"})


def is_snake_case(name: str) -> bool:
    return bool(_SNAKE_RE.match(name))


def is_kebab_case(name: str) -> bool:
    return bool(_KEBAB_RE.match(name))


def is_camel_case(name: str) -> bool:
    return bool(_CAMEL_RE.match(name))


def is_pascal_case(name: str) -> bool:
    return bool(_PASCAL_RE.match(name))


def detect_casing(name: str) -> str:
    """Return the casing style of *name*, one of :data:`CASING_STYLES`.

    Single lower-case words are reported as ``snake`` although they are also
    valid kebab and camel case; callers that care should use the ``is_*``
    predicates instead.
    """
    if is_snake_case(name):
        return "snake"
    if is_kebab_case(name):
        return "kebab"
    if is_camel_case(name):
        return "camel"
    if is_pascal_case(name):
        return "pascal"
    return "other"


def split_words(name: str) -> list[str]:
    """Split an identifier in any casing into lower-case words."""
    words: list[str] = []
    for chunk in re.split(r"[\s_\-.]+", name):
        if not chunk:
            continue
        words.extend(match.lower() for match in _WORD_RE.findall(chunk))
    return words


def to_snake(name: str) -> str:
    return "_".join(split_words(name))


def to_kebab(name: str) -> str:
    return "-".join(split_words(name))


def to_pascal(name: str) -> str:
    return "".join(word.capitalize() for word in split_words(name))


def to_camel(name: str) -> str:
    pascal = to_pascal(name)
    return pascal[:1].lower() + pascal[1:]


# ---------------------------------------------------------------------------
# Inflection
# ---------------------------------------------------------------------------

UNCOUNTABLE: frozenset[str] = frozenset(
    {
        "audio",
        "data",
        "equipment",
        "feedback",
        "fish",
        "information",
        "metadata",
        "money",
        "news",
        "police",
        "rice",
        "series",
        "sheep",
        "software",
        "species",
        "staff",
    }
)

_IRREGULAR_PLURALS: dict[str, str] = {
    "child": "children",
    "foot": "feet",
    "goose": "geese",
    "half": "halves",
    "knife": "knives",
    "leaf": "leaves",
    "life": "lives",
    "man": "men",
    "mouse": "mice",
    "ox": "oxen",
    "person": "people",
    "shelf": "shelves",
    "thief": "thieves",
    "tooth": "teeth",
    "wife": "wives",
    "wolf": "wolves",
    "woman": "women",
}
_IRREGULAR_SINGULARS: dict[str, str] = {plural: single for single, plural in _IRREGULAR_PLURALS.items()}

# Singular words that end in "ie" and would otherwise be singularized to "-y".
_IE_WORDS: frozenset[str] = frozenset(
    {"calorie", "cookie", "movie", "pie", "rookie", "selfie", "tie", "zombie"}
)

# Singular words ending in "s" that must not lose it.
_S_ENDINGS: tuple[str, ...] = ("ss", "us", "is", "ics")

_SINGULAR_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"(analy|ba|diagno|parenthe|progno|synop|the)ses$"), r"\1sis"),
    (re.compile(r"(alias|bus|campus|status|virus)es$"), r"\1"),
    (re.compile(r"(ss|x|ch|sh|zz)es$"), r"\1"),
    (re.compile(r"([^aeiou])ies$"), r"\1y"),
    (re.compile(r"s$"), ""),
)

_PLURAL_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"(analy|ba|diagno|parenthe|progno|synop|the)sis$"), r"\1ses"),
    (re.compile(r"(s|x|z|ch|sh)$"), r"\1es"),
    (re.compile(r"([^aeiou])y$"), r"\1ies"),
)


def _match_case(source: str, result: str) -> str:
    if source[:1].isupper():
        return result[:1].upper() + result[1:]
    return result


def singularize(word: str) -> str:
    """Return the singular form of a single English *word*."""
    lower = word.lower()
    if not lower or lower in UNCOUNTABLE:
        return word
    if lower in _IRREGULAR_SINGULARS:
        return _match_case(word, _IRREGULAR_SINGULARS[lower])
    if lower in _IRREGULAR_PLURALS:
        return word
    if lower.endswith("ies") and lower[:-1] in _IE_WORDS:
        return word[:-1]
    if lower.endswith(_S_ENDINGS):
        return word
    for pattern, replacement in _SINGULAR_RULES:
        if pattern.search(lower):
            return _match_case(word, pattern.sub(replacement, lower))
    return word


def pluralize(word: str) -> str:
    """Return the plural form of a single English *word*."""
    lower = word.lower()
    if not lower or lower in UNCOUNTABLE:
        return word
    if lower in _IRREGULAR_PLURALS:
        return _match_case(word, _IRREGULAR_PLURALS[lower])
    if lower in _IRREGULAR_SINGULARS:
        return word
    for pattern, replacement in _PLURAL_RULES:
        if pattern.search(lower):
            return _match_case(word, pattern.sub(replacement, lower))
    return word + "s"


def is_plural(word: str) -> bool:
    lower = word.lower()
    return lower in UNCOUNTABLE or singularize(lower) != lower


def is_singular(word: str) -> bool:
    lower = word.lower()
    return lower in UNCOUNTABLE or singularize(lower) == lower


def last_word(name: str) -> str:
    words = split_words(name)
    return words[-1] if words else ""


def singular_identifier(name: str) -> str:
    """Singularize the last word of a compound identifier, keeping its casing.

    ``ArticleComments`` -> ``ArticleComment``, ``blog_posts`` -> ``blog_post``.
    """
    words = split_words(name)
    if not words:
        return name
    words[-1] = singularize(words[-1])
    return _rejoin(name, words)


def plural_identifier(name: str) -> str:
    """Pluralize the last word of a compound identifier, keeping its casing."""
    words = split_words(name)
    if not words:
        return name
    words[-1] = pluralize(words[-1])
    return _rejoin(name, words)


def _rejoin(original: str, words: list[str]) -> str:
    style = detect_casing(original)
    if style == "kebab":
        return "-".join(words)
    if style == "camel":
        return to_camel("_".join(words))
    if style == "pascal" or original[:1].isupper():
        return to_pascal("_".join(words))
    return "_".join(words)
