from __future__ import annotations

"""Product input records, derived SEO records, and the error hierarchy."""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Sequence


class PinMetaError(Exception):
    """Base class for failures that abort a PinMeta run."""


class InputParseError(PinMetaError):
    """Raised when the input file cannot be read or is not a JSON array."""


class MalformedRecordError(InputParseError):
    """Raised when a product field is read but is missing or unusable."""

    def __init__(self, index: int, field: str, reason: str) -> None:
        self.index = index
        self.field = field
        super().__init__(f"Product #{index}: field '{field}' {reason}")


class ConfigError(PinMetaError):
    """Raised when config.yaml exists but cannot be interpreted."""


# Input JSON key for each ProductRecord attribute.
_FIELD_KEYS = {
    "handle": "handle",
    "title": "title",
    "description": "description",
    "alt_text": "alt",
    "board": "board",
    "url": "url",
    "tags": "tags",
    "image_url": "image_url",
}


@dataclass(frozen=True)
class ProductRecord:
    """One product as supplied by the caller.

    Fields are read from the decoded JSON object when first used, so a missing
    or mistyped field only fails the pass that needs it.
    """

    data: Mapping[str, Any]
    index: int = 0

    @classmethod
    def from_dict(cls, raw: Any, index: int = 0) -> "ProductRecord":
        return cls(data=raw, index=index)

    def _field(self, attr: str) -> Any:
        key = _FIELD_KEYS[attr]
        if not isinstance(self.data, Mapping):
            raise MalformedRecordError(self.index, key, "cannot be read: record is not a JSON object")
        if key not in self.data:
            raise MalformedRecordError(self.index, key, "is missing")
        return self.data[key]

    @property
    def handle(self) -> str:
        return self._field("handle")

    @property
    def title(self) -> str:
        return self._field("title")

    @property
    def description(self) -> str:
        return self._field("description")

    @property
    def alt_text(self) -> str:
        return self._field("alt_text")

    @property
    def board(self) -> str:
        return self._field("board")

    @property
    def url(self) -> str:
        return self._field("url")

    @property
    def image_url(self) -> str:
        return self._field("image_url")

    @property
    def tags(self) -> Sequence[Any]:
        tags = self._field("tags")
        if isinstance(tags, str) or not isinstance(tags, Sequence):
            raise MalformedRecordError(self.index, "tags", "must be a list")
        return tags

    @property
    def label(self) -> str:
        """Handle for log lines, or the input position when the handle is unusable."""
        if isinstance(self.data, Mapping) and isinstance(self.data.get("handle"), str):
            return self.data["handle"]
        return f"#{self.index}"


@dataclass(frozen=True)
class SeoMetadataRecord:
    """Truncated per-product SEO metadata."""

    product_handle: str
    meta_title: str
    meta_description: str
    image_alt_text: str

    def to_dict(self) -> Dict[str, str]:
        # Key order is part of the output format.
        return {
            "product_handle": self.product_handle,
            "meta_title": self.meta_title,
            "meta_description": self.meta_description,
            "image_alt_text": self.image_alt_text,
        }
