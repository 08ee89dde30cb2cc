"""Shared fixtures for PinMeta tests."""

import json

import pytest

from pinmeta.models import ProductRecord


@pytest.fixture
def mug_payload():
    """Raw JSON element for the reference mug product."""
    return {
        "handle": "mug-1",
        "title": "A great mug",
        "description": "Holds coffee well",
        "alt": "a red mug on a table",
        "board": "Kitchen",
        "url": "https://x/mug-1",
        "tags": ["mug", "kitchen"],
        "image_url": "https://x/mug-1.jpg",
    }


@pytest.fixture
def product_factory(mug_payload):
    """Return a helper that builds a ProductRecord from the mug payload.

    Overrides use input JSON keys (``alt``, ``image_url``).
    """

    def _build(**overrides):
        return ProductRecord.from_dict(dict(mug_payload, **overrides))

    return _build


@pytest.fixture
def write_input(tmp_path):
    """Return a helper that dumps a product list to a JSON file."""

    def _write(products, name="products.json"):
        path = tmp_path / name
        path.write_text(json.dumps(products), encoding="utf-8")
        return path

    return _write
