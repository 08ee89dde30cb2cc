from __future__ import annotations

"""Banned-word screening for product copy."""

import logging
import re
from typing import Iterable, List, Pattern, Tuple

from pinmeta.models import PinMetaError, ProductRecord
from pinmeta.utils import DEFAULT_BANNED_WORDS


logger = logging.getLogger("pinmeta.validator")


class BannedWordError(PinMetaError, ValueError):
    """Raised when validated text contains a banned whole word."""

    def __init__(self, word: str, text: str) -> None:
        self.word = word
        self.text = text
        super().__init__(f'Banned word "{word}" detected in: {text}')


class ContentValidator:
    """Reject text that contains any configured banned word."""

    def __init__(self, banned_words: Iterable[str] = DEFAULT_BANNED_WORDS, allow_override: bool = False) -> None:
        self.allow_override = allow_override
        # ASCII \b so only [A-Za-z0-9_] count as word characters.
        self._patterns: List[Tuple[str, Pattern[str]]] = [
            (word, re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE | re.ASCII)) for word in banned_words
        ]

    def validate(self, text: str) -> None:
        """Raise BannedWordError on the first banned word found in text."""
        if self.allow_override:
            return
        for word, pattern in self._patterns:
            if pattern.search(text):
                logger.debug("Banned word matched", extra={"event": "banned_word", "word": word, "context": text})
                raise BannedWordError(word, text)

    def validate_product(self, product: ProductRecord) -> None:
        """Validate the free-text fields of a product in output order."""
        for field_name in ("title", "description", "alt_text"):
            try:
                self.validate(getattr(product, field_name))
            except BannedWordError as exc:
                logger.warning(
                    "Product rejected",
                    extra={"event": "banned_word", "handle": product.label, "word": exc.word, "context": field_name},
                )
                raise
