from __future__ import annotations

"""SEO metadata generation: one JSON document per product handle."""

import json
import logging
from pathlib import Path
from typing import List, Sequence

from pinmeta.content_validator import ContentValidator
from pinmeta.models import ProductRecord, SeoMetadataRecord
from pinmeta.utils import LimitsConfig, truncate_text


logger = logging.getLogger("pinmeta.seo")


class SEOEngine:
    """Project product records into truncated SEO metadata files."""

    def __init__(self, output_dir: Path, validator: ContentValidator, limits: LimitsConfig | None = None) -> None:
        self.output_dir = output_dir
        self.validator = validator
        self.limits = limits or LimitsConfig()

    def build_metadata(self, product: ProductRecord) -> SeoMetadataRecord:
        # Validation sees the original text, never the truncated copy.
        self.validator.validate_product(product)
        return SeoMetadataRecord(
            product_handle=product.handle,
            meta_title=truncate_text(product.title, self.limits.meta_title),
            meta_description=truncate_text(product.description, self.limits.meta_description),
            image_alt_text=truncate_text(product.alt_text, self.limits.image_alt_text),
        )

    def write_metadata(self, record: SeoMetadataRecord) -> Path:
        """Write one pretty-printed JSON file, replacing any previous one."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        destination = self.output_dir / f"{record.product_handle}.json"
        destination.write_text(json.dumps(record.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("Wrote SEO metadata", extra={"event": "seo_written", "handle": record.product_handle})
        return destination

    def project(self, products: Sequence[ProductRecord]) -> List[Path]:
        """Build and write metadata for every product, stopping at the first failure.

        Files written before a failure are left on disk.
        """
        written: List[Path] = []
        for product in products:
            record = self.build_metadata(product)
            written.append(self.write_metadata(record))
        return written
