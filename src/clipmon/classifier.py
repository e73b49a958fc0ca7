"""Content classification heuristics for captured clipboard text.

Everything here is a pure function of the input string, except language
detection which is delegated to an injected identifier.
"""

import re
from collections.abc import Callable

from clipmon.config import LANGUAGE_MIN_LENGTH, LONG_TEXT_THRESHOLD
from clipmon.models import Classification, ContentType

LanguageIdentifier = Callable[[str], str | None]

URL_PATTERN = re.compile(
    r"^https?://[\w\-_]+(\.[\w\-_]+)+([\w\-.,@?^=%&:/~+#]*[\w\-@?^=%&/~+#])?"
)
EMAIL_PATTERN = re.compile(r"[\w.-]+@[\w.-]+\.[a-zA-Z]{2,}")
DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
NUMBER_PATTERN = re.compile(r"\d+")
# Every line terminator is its own separator, so "\r\n" counts twice.
NEWLINE_PATTERN = re.compile(r"[\n\v\f\r\x85\u2028\u2029]")


def count_words(text: str) -> int:
    return len(text.split())


def count_lines(text: str) -> int:
    """Count segments produced by splitting on newline characters.

    A trailing newline yields an extra empty segment: "a\\n" has 2 lines.
    """
    return len(NEWLINE_PATTERN.split(text))


def is_url(text: str) -> bool:
    # Prefix match only; anything after a valid URL prefix is accepted.
    return URL_PATTERN.match(text) is not None


def is_email(text: str) -> bool:
    return EMAIL_PATTERN.fullmatch(text) is not None


def determine_content_type(text: str) -> ContentType:
    if is_url(text):
        return ContentType.URL
    if is_email(text):
        return ContentType.EMAIL
    if DATE_PATTERN.search(text):
        return ContentType.DATE_CONTAINING
    if NUMBER_PATTERN.search(text):
        return ContentType.NUMERIC_CONTAINING
    if "\n" in text or len(text) > LONG_TEXT_THRESHOLD:
        return ContentType.LONG_TEXT
    return ContentType.SHORT_TEXT


def detect_language(text: str, language_identifier: LanguageIdentifier | None = None) -> str | None:
    if language_identifier is None or len(text) <= LANGUAGE_MIN_LENGTH:
        return None
    return language_identifier(text) or None


def classify(text: str, language_identifier: LanguageIdentifier | None = None) -> Classification:
    """Derive metadata for a piece of clipboard text.

    Args:
        text: The captured clipboard text
        language_identifier: Optional callable returning a language code for
            text longer than LANGUAGE_MIN_LENGTH characters

    Returns:
        A Classification; identical input gives identical output apart from
        language_detected, which depends on the identifier
    """
    return Classification(
        character_count=len(text),
        word_count=count_words(text),
        line_count=count_lines(text),
        content_type=determine_content_type(text),
        is_url=is_url(text),
        is_email=is_email(text),
        language_detected=detect_language(text, language_identifier),
    )
