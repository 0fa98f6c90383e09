"""Initial catalog content written when no snapshot exists yet."""

from __future__ import annotations

from .auth import User
from .models import utc_timestamp

SEED_USERS = (
    User(id="1", username="admin", password="admin123", role="admin"),
)

SEED_CATEGORIES = (
    {"id": "1", "name": {"en": "Plates", "it": "Piatti"}, "slug": "plates"},
    {"id": "2", "name": {"en": "Bowls", "it": "Ciotole"}, "slug": "bowls"},
    {"id": "3", "name": {"en": "Accessories", "it": "Accessori"}, "slug": "accessories"},
)


def seed_products() -> list[dict]:
    # Bundled frontend assets, never owned by the image manager.
    created_at = utc_timestamp()
    return [
        {
            "id": "1",
            "name": {"en": "Salad Plate", "it": "Piatto da Insalata"},
            "description": {"en": "13' Salad Plate", "it": "Piatto da Insalata 13'"},
            "category": "plates",
            "image": "/src/assets/images/Salata.png",
            "dimensions": "33 cm",
            "material": "Melamine",
            "createdAt": created_at,
        },
        {
            "id": "2",
            "name": {"en": "Round Plate", "it": "Piatto Rotondo"},
            "description": {"en": "8.75 Round Plate Pink", "it": "Piatto Rotondo Rosa 8.75"},
            "category": "plates",
            "image": "/src/assets/images/8.75 Round Plate Pembe.png",
            "dimensions": "22 cm",
            "material": "Melamine",
            "createdAt": created_at,
        },
        {
            "id": "3",
            "name": {"en": "Oval Salad Plate", "it": "Piatto da Insalata Ovale"},
            "description": {"en": "33 cm Oval Salad Plate", "it": "Piatto da Insalata Ovale 33 cm"},
            "category": "plates",
            "image": "/src/assets/images/Yeni Oval Büyük Salata.png",
            "dimensions": "33 cm",
            "material": "Melamine",
            "createdAt": created_at,
        },
    ]
