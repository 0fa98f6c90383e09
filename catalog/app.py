"""Flask API for the product catalog.

- Products and categories are held in memory and every change rewrites the
  matching JSON snapshot under ``DATA_DIR``; missing snapshots are seeded on
  start-up.
- Product create/update accept multipart requests with a ``data`` field
  holding the product JSON and an optional ``image`` file. Images are stored
  under ``UPLOAD_DIR`` and served back from ``/uploads``.
- Login is a plaintext check against a fixed user list that hands back a
  stable, non-expiring token.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from flask import Blueprint, Flask, current_app, jsonify, request, send_from_directory
from flask_cors import CORS
from flask_talisman import Talisman
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from commonlib.config import CatalogConfig, load_catalog_config
from commonlib.storage import SnapshotStore

from .auth import CredentialCheck
from .errors import CatalogError, InvalidCredentials, MalformedPayload
from .images import ImageManager
from .models import Category, LoginModel, Product
from .seed import SEED_CATEGORIES, SEED_USERS, seed_products
from .service import CatalogService
from .store import RecordStore

BASE_DIR = Path(__file__).resolve().parent

# Room for the multipart envelope and the ``data`` field around the image.
FORM_OVERHEAD_BYTES = 64 * 1024

api = Blueprint("api", __name__, url_prefix="/api")


def _catalog() -> CatalogService:
    return current_app.extensions["catalog"]


def _credentials() -> CredentialCheck:
    return current_app.extensions["catalog_auth"]


def _product_payload(message: str) -> Any:
    """Return the decoded product JSON from a multipart or JSON request."""

    if request.is_json:
        payload = request.get_json(silent=True)
        if payload is None:
            raise MalformedPayload(message, cause="request body is not valid JSON")
        return payload
    raw = request.form.get("data")
    if raw is None:
        raise MalformedPayload(message, cause="missing 'data' form field")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MalformedPayload(message, cause=str(exc)) from exc


def _stored_upload() -> str | None:
    upload = request.files.get("image")
    if upload is None or not upload.filename:
        return None
    return _catalog().images.save(upload)


# ---------------------------------------------------------------------------
# Routes: Products
# ---------------------------------------------------------------------------
@api.route("/products", methods=["GET"])
def list_products():
    return jsonify([product.to_document() for product in _catalog().list_products()])


@api.route("/products/<product_id>", methods=["GET"])
def get_product(product_id):
    return jsonify(_catalog().get_product(product_id).to_document())


@api.route("/products", methods=["POST"])
def create_product():
    catalog = _catalog()
    payload = _product_payload("Error creating product")
    image_path = _stored_upload()
    try:
        product = catalog.create_product(payload, image_path)
    except CatalogError:
        catalog.images.release(image_path)
        raise
    return jsonify(product.to_document()), 201


@api.route("/products/<product_id>", methods=["PUT"])
def update_product(product_id):
    catalog = _catalog()
    catalog.get_product(product_id)
    payload = _product_payload("Error updating product")
    image_path = _stored_upload()
    try:
        product = catalog.update_product(product_id, payload, image_path)
    except CatalogError:
        catalog.images.release(image_path)
        raise
    return jsonify(product.to_document())


@api.route("/products/<product_id>", methods=["DELETE"])
def delete_product(product_id):
    _catalog().delete_product(product_id)
    return jsonify({"message": "Product deleted successfully"})


# ---------------------------------------------------------------------------
# Routes: Categories
# ---------------------------------------------------------------------------
@api.route("/categories", methods=["GET"])
def list_categories():
    return jsonify([category.to_document() for category in _catalog().list_categories()])


@api.route("/categories/<category_id>", methods=["GET"])
def get_category(category_id):
    return jsonify(_catalog().get_category(category_id).to_document())


@api.route("/categories", methods=["POST"])
def create_category():
    category = _catalog().create_category(request.get_json(silent=True))
    return jsonify(category.to_document()), 201


@api.route("/categories/<category_id>", methods=["PUT"])
def update_category(category_id):
    category = _catalog().update_category(category_id, request.get_json(silent=True))
    return jsonify(category.to_document())


@api.route("/categories/<category_id>", methods=["DELETE"])
def delete_category(category_id):
    _catalog().delete_category(category_id)
    return jsonify({"message": "Category deleted successfully"})


# ---------------------------------------------------------------------------
# Routes: Auth
# ---------------------------------------------------------------------------
@api.route("/auth/login", methods=["POST"])
def login():
    try:
        credentials = LoginModel.model_validate(request.get_json(silent=True) or {})
    except ValidationError as err:
        raise InvalidCredentials() from err
    session = _credentials().authenticate(credentials.username, credentials.password)
    return jsonify(session.to_dict())


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------
def handle_catalog_error(err: CatalogError):
    if err.status_code >= 500:
        current_app.logger.error("%s: %s", err.message, err.cause)
    return jsonify(err.to_dict()), err.status_code


def handle_http_error(err: HTTPException):
    return jsonify({"message": err.description or err.name}), err.code


def handle_unexpected_error(err: Exception):
    current_app.logger.exception("Unhandled error while serving %s", request.path)
    return jsonify({"message": "Something went wrong!", "error": str(err)}), 500


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------
def create_app(config: CatalogConfig | None = None) -> Flask:
    config = config or load_catalog_config(BASE_DIR)

    app = Flask(__name__, static_folder=None)
    app.config.update(
        SECRET_KEY=config.secret_key,
        MAX_CONTENT_LENGTH=config.max_upload_bytes + FORM_OVERHEAD_BYTES,
        CATALOG_CONFIG=config,
    )
    app.json.sort_keys = False
    app.logger.setLevel(config.log_level)
    for name in ("catalog", "commonlib"):
        logging.getLogger(name).setLevel(config.log_level)

    origins = list(config.allowed_origins)
    CORS(app, resources={r"/api/*": {"origins": origins}, r"/uploads/*": {"origins": origins}})
    Talisman(app, content_security_policy=None, force_https=config.force_tls)

    snapshots = SnapshotStore(config.data_dir, backups=config.snapshot_backups)
    products = RecordStore("products", Product, snapshots, seed=seed_products())
    categories = RecordStore("categories", Category, snapshots, seed=SEED_CATEGORIES)
    images = ImageManager(config.upload_dir, config.upload_url_prefix, config.max_upload_bytes)
    app.extensions["catalog"] = CatalogService(products, categories, images)
    app.extensions["catalog_auth"] = CredentialCheck(SEED_USERS, config.secret_key)

    @app.route(f"{config.upload_url_prefix}/<path:filename>")
    def serve_upload(filename: str):
        return send_from_directory(config.upload_dir, filename)

    app.register_blueprint(api)
    app.register_error_handler(CatalogError, handle_catalog_error)
    app.register_error_handler(HTTPException, handle_http_error)
    app.register_error_handler(Exception, handle_unexpected_error)
    return app


def main() -> None:
    config = load_catalog_config(BASE_DIR)
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(config)
    app.logger.info("Catalog API server running on port %s", config.port)
    app.run(host=config.host, port=config.port)


if __name__ == "__main__":
    main()
