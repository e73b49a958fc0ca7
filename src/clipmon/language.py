import logging

from NaturalLanguage import NLLanguageRecognizer

logger = logging.getLogger(__name__)

UNDETERMINED = "und"


def detect_dominant_language(text: str) -> str | None:
    """Best-guess BCP 47 language code for text, or None if undetermined."""
    try:
        recognizer = NLLanguageRecognizer.alloc().init()
        recognizer.processString_(text)
        language = recognizer.dominantLanguage()
    except Exception:
        logger.debug("Language detection failed", exc_info=True)
        return None
    if not language or language == UNDETERMINED:
        return None
    return str(language)
