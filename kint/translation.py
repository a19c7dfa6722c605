import logging

from deep_translator import GoogleTranslator
from deep_translator.exceptions import BaseError as TranslatorError
from flask import current_app

logger = logging.getLogger(__name__)


class TranslationFailed(Exception):
    pass


def split_by_length(text, max_len):
    if len(text) <= max_len:
        return [text]
    return [text[i:i + max_len] for i in range(0, len(text), max_len)]


def translate(text, source='ar', target='en'):
    """Translate *text*, chunking long input; raises ``TranslationFailed``."""
    if not text:
        return ''
    chunk_size = current_app.config.get('TRANSLATE_CHUNK_SIZE', 450)
    try:
        translator = GoogleTranslator(source=source, target=target)
        return ''.join(translator.translate(chunk) or '' for chunk in split_by_length(text, chunk_size))
    except (TranslatorError, OSError) as exc:
        raise TranslationFailed(str(exc)) from exc


def translate_text(text, source='ar', target='en'):
    """Best-effort variant used to prefill bilingual fields; ``None`` on failure."""
    if not text:
        return None
    try:
        return translate(text, source=source, target=target)
    except TranslationFailed as exc:
        logger.warning("Auto-translation failed: %s", exc)
        return None
