from __future__ import annotations

"""Application entrypoint for PinMeta."""

import argparse
import logging
from pathlib import Path
import sys
from typing import List, Optional

from pinmeta.content_validator import ContentValidator
from pinmeta.csv_writer import PinFeedWriter
from pinmeta.models import PinMetaError
from pinmeta.seo_engine import SEOEngine
from pinmeta.utils import AppConfig, load_config, load_products, resolve_config_path, setup_logging


def run(input_path: Path, config: AppConfig) -> int:
    """Execute both projection passes and return the product count."""
    logger = logging.getLogger("pinmeta")

    products = load_products(input_path)
    logger.info("Loaded products", extra={"event": "load", "context": f"{len(products)} from {input_path}"})

    # Build service objects once and reuse for the full batch.
    validator = ContentValidator(
        banned_words=config.validation.banned_words,
        allow_override=config.validation.allow_override,
    )
    seo_engine = SEOEngine(output_dir=config.paths.seo_dir, validator=validator, limits=config.limits)
    pin_writer = PinFeedWriter(output_csv=config.paths.pins_csv, validator=validator, limits=config.limits)

    # Any failure aborts the run; SEO files already written are kept.
    seo_engine.project(products)
    pin_writer.write(products)
    return len(products)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pinmeta",
        description="Generate per-product SEO JSON files and a pin feed CSV.",
    )
    parser.add_argument("input_json", type=Path, help="path to a JSON array of product records")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Parse CLI args, load config, and run the pipeline."""
    args = build_parser().parse_args(argv)

    config = load_config(resolve_config_path())
    setup_logging(config.log_level)
    logger = logging.getLogger("pinmeta")
    if config.validation.allow_override:
        logger.info(
            "Banned-word check disabled",
            extra={"event": "config", "context": config.validation.override_env},
        )

    try:
        count = run(args.input_json, config)
    except PinMetaError as exc:
        logger.error("Run aborted", extra={"event": "error", "context": str(exc)})
        sys.exit(1)

    print(f"Generated SEO and pins files for {count} products.")


if __name__ == "__main__":
    main()
