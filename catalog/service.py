"""Product and category operations on top of the record stores."""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from .errors import MalformedPayload, ValidationFailure
from .images import ImageManager
from .models import Category, CategoryPayload, Product, ProductPayload
from .store import RecordStore

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def derive_slug(name: Optional[Mapping[str, str]]) -> str:
    """Build a category slug from the English name.

    >>> derive_slug({"en": "Salad Bowls"})
    'salad-bowls'
    """

    english = (name or {}).get("en")
    if not english:
        raise ValidationFailure(
            "Category slug is required",
            cause="name.en is needed to derive a slug",
        )
    return _WHITESPACE.sub("-", english.lower())


def _validation_message(err: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in e['loc']) or 'payload'}: {e['msg']}"
        for e in err.errors()
    )


class CatalogService:
    def __init__(
        self,
        products: RecordStore[Product],
        categories: RecordStore[Category],
        images: ImageManager,
    ) -> None:
        self.products = products
        self.categories = categories
        self.images = images

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------
    @staticmethod
    def _parse_product(payload: Any, message: str) -> dict:
        if not isinstance(payload, Mapping):
            raise MalformedPayload(message, cause="product data must be a JSON object")
        try:
            parsed = ProductPayload.model_validate(dict(payload))
        except ValidationError as err:
            raise MalformedPayload(message, cause=_validation_message(err)) from err
        return parsed.model_dump(exclude_unset=True)

    def list_products(self) -> list[Product]:
        return self.products.list()

    def get_product(self, product_id: str) -> Product:
        return self.products.get(product_id)

    def create_product(self, payload: Any, uploaded_image: str | None = None) -> Product:
        fields = self._parse_product(payload, "Error creating product")
        if uploaded_image:
            fields["image"] = uploaded_image
        product = self.products.insert(fields)
        logger.info("Created product %s", product.id)
        return product

    def update_product(
        self,
        product_id: str,
        payload: Any,
        uploaded_image: str | None = None,
    ) -> Product:
        existing = self.products.get(product_id)
        patch = self._parse_product(payload, "Error updating product")
        if uploaded_image:
            patch["image"] = uploaded_image
        elif not patch.get("image"):
            patch["image"] = existing.image
        updated = self.products.update(product_id, patch)
        if existing.image and existing.image != updated.image:
            self.images.release(existing.image)
        logger.info("Updated product %s", product_id)
        return updated

    def delete_product(self, product_id: str) -> Product:
        removed = self.products.delete(product_id)
        self.images.release(removed.image)
        logger.info("Deleted product %s", product_id)
        return removed

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------
    @staticmethod
    def _parse_category(payload: Any) -> dict:
        if not isinstance(payload, Mapping):
            raise ValidationFailure("Invalid category", cause="category data must be a JSON object")
        try:
            parsed = CategoryPayload.model_validate(dict(payload))
        except ValidationError as err:
            raise ValidationFailure("Invalid category", cause=_validation_message(err)) from err
        return parsed.model_dump(exclude_unset=True)

    def list_categories(self) -> list[Category]:
        return self.categories.list()

    def get_category(self, category_id: str) -> Category:
        return self.categories.get(category_id)

    def create_category(self, payload: Any) -> Category:
        fields = self._parse_category(payload)
        fields["slug"] = fields.get("slug") or derive_slug(fields.get("name"))
        category = self.categories.insert(fields)
        logger.info("Created category %s (%s)", category.id, category.slug)
        return category

    def update_category(self, category_id: str, payload: Any) -> Category:
        existing = self.categories.get(category_id)
        patch = self._parse_category(payload)
        if not patch.get("slug"):
            name = patch["name"] if "name" in patch else existing.name
            patch["slug"] = derive_slug(name)
        category = self.categories.update(category_id, patch)
        logger.info("Updated category %s (%s)", category.id, category.slug)
        return category

    def delete_category(self, category_id: str) -> Category:
        removed = self.categories.delete(category_id)
        logger.info("Deleted category %s", category_id)
        return removed
