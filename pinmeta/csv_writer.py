from __future__ import annotations

"""Pin feed CSV persistence for the pin-generation tool."""

import logging
from pathlib import Path
from typing import Dict, List, Sequence

import pandas as pd

from pinmeta.content_validator import ContentValidator
from pinmeta.models import ProductRecord
from pinmeta.utils import LimitsConfig, truncate_text


logger = logging.getLogger("pinmeta.pins")


PIN_COLUMNS = [
    "Title",
    "Description",
    "Alt Text",
    "Board",
    "URL",
    "Tags",
    "Image_URL",
]


def strip_quotes(text: str) -> str:
    """Delete every double-quote character."""
    return text.replace('"', "")


def quote_field(value: str) -> str:
    """Wrap a field in double quotes when it contains a comma."""
    return f'"{value}"' if "," in value else value


class PinFeedWriter:
    """Render all products into a single pin feed CSV."""

    def __init__(self, output_csv: Path, validator: ContentValidator, limits: LimitsConfig | None = None) -> None:
        self.output_csv = output_csv
        self.validator = validator
        self.limits = limits or LimitsConfig()

    def build_row(self, product: ProductRecord) -> Dict[str, str]:
        """Validate one product and shape it into the canonical pin columns."""
        # Re-validated independently of the SEO pass.
        self.validator.validate_product(product)
        return {
            "Title": strip_quotes(truncate_text(product.title, self.limits.meta_title)),
            "Description": strip_quotes(truncate_text(product.description, self.limits.meta_description)),
            "Alt Text": strip_quotes(truncate_text(product.alt_text, self.limits.image_alt_text)),
            "Board": product.board,
            "URL": product.url,
            "Tags": " ".join(str(tag) for tag in product.tags),
            "Image_URL": product.image_url,
        }

    def build_frame(self, products: Sequence[ProductRecord]) -> pd.DataFrame:
        """Tabulate validated rows in input order, with fields already quoted."""
        rows = [self.build_row(product) for product in products]
        frame = pd.DataFrame(rows, columns=PIN_COLUMNS, dtype=object)
        for column in PIN_COLUMNS:
            frame[column] = frame[column].map(quote_field)
        return frame

    def render(self, products: Sequence[ProductRecord]) -> str:
        """Return header plus one line per product, newline-joined."""
        frame = self.build_frame(products)
        # Fields are pre-quoted; a csv dialect would add escaping the feed must not have.
        lines: List[str] = [",".join(PIN_COLUMNS)]
        lines.extend(",".join(row) for row in frame.itertuples(index=False, name=None))
        return "\n".join(lines)

    def write(self, products: Sequence[ProductRecord]) -> Path:
        """Validate and render everything, then overwrite the CSV in one write."""
        content = self.render(products)
        self.output_csv.parent.mkdir(parents=True, exist_ok=True)
        self.output_csv.write_text(content, encoding="utf-8")
        logger.info(
            "Wrote pin feed",
            extra={"event": "pins_written", "context": f"{len(products)} rows -> {self.output_csv}"},
        )
        return self.output_csv
