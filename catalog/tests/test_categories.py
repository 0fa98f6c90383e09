import json

import pytest

from catalog.errors import ValidationFailure
from catalog.service import derive_slug


@pytest.mark.parametrize(
    "name, expected",
    [
        ({"en": "Salad Bowls"}, "salad-bowls"),
        ({"en": "Multi   Space"}, "multi-space"),
        ({"en": "Tea\tCups", "it": "Tazze"}, "tea-cups"),
    ],
)
def test_derive_slug(name, expected):
    assert derive_slug(name) == expected


def test_derive_slug_requires_english_name():
    with pytest.raises(ValidationFailure):
        derive_slug({"it": "Ciotole"})
    with pytest.raises(ValidationFailure):
        derive_slug(None)


def test_seed_categories_are_listed(client):
    response = client.get("/api/categories")
    assert response.status_code == 200
    assert [c["slug"] for c in response.get_json()] == ["plates", "bowls", "accessories"]


def test_create_category_derives_slug(client, config):
    response = client.post("/api/categories", json={"name": {"en": "Salad Bowls", "it": "Insalatiere"}})
    assert response.status_code == 201
    category = response.get_json()
    assert category["slug"] == "salad-bowls"
    assert category["id"] not in {"1", "2", "3"}

    saved = json.loads((config.data_dir / "categories.json").read_text(encoding="utf-8"))
    assert saved[-1] == category


def test_create_category_keeps_explicit_slug(client):
    response = client.post("/api/categories", json={"name": {"en": "Trays"}, "slug": "serving-trays"})
    assert response.get_json()["slug"] == "serving-trays"


def test_create_category_without_english_name(client):
    response = client.post("/api/categories", json={"name": {"it": "Vassoi"}})
    assert response.status_code == 400
    body = response.get_json()
    assert body["message"] == "Category slug is required"
    assert len(client.get("/api/categories").get_json()) == 3


def test_create_category_rejects_non_object(client):
    response = client.post("/api/categories", data="not json", content_type="text/plain")
    assert response.status_code == 400


def test_get_category(client):
    assert client.get("/api/categories/2").get_json()["slug"] == "bowls"
    assert client.get("/api/categories/missing").status_code == 404


def test_update_category_rederives_slug_from_new_name(client):
    response = client.put("/api/categories/2", json={"name": {"en": "Soup Bowls"}})
    assert response.status_code == 200
    category = response.get_json()
    assert category["slug"] == "soup-bowls"
    assert category["name"] == {"en": "Soup Bowls"}
    assert [c["id"] for c in client.get("/api/categories").get_json()] == ["1", "2", "3"]


def test_update_category_with_explicit_slug(client):
    response = client.put("/api/categories/3", json={"slug": "extras"})
    category = response.get_json()
    assert category["slug"] == "extras"
    assert category["name"] == {"en": "Accessories", "it": "Accessori"}


def test_update_missing_category(client):
    response = client.put("/api/categories/missing", json={"name": {"en": "X"}})
    assert response.status_code == 404
    assert response.get_json() == {"message": "Category not found"}


def test_delete_category_keeps_products(client):
    response = client.delete("/api/categories/1")
    assert response.status_code == 200
    assert response.get_json() == {"message": "Category deleted successfully"}
    assert client.get("/api/categories/1").status_code == 404
    products = client.get("/api/products").get_json()
    assert all(p["category"] == "plates" for p in products)
    assert client.delete("/api/categories/1").status_code == 404
