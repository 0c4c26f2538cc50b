"""Flask API for the grocery product catalog.

- Products are persisted to a single local JSON array; every mutation is a
  full read-modify-write of that document.
- ``GET /products`` supports category/brand/inStock/price filters and
  page/limit pagination.
- Every request is appended to a plain-text request log before routing.
"""

from __future__ import annotations

import logging
from pathlib import Path

from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_talisman import Talisman
from werkzeug.exceptions import HTTPException

from grocerylib.config import AppConfig, load_app_config
from grocerylib.requestlog import RequestLog
from grocerylib.storage import ListStore, StoreError

from .services.product_store import ProductCatalog, ProductError
from .services.schemas import ProductFilters

BASE_DIR = Path(__file__).resolve().parent


def _request_target() -> str:
    query = request.query_string.decode("utf-8", errors="replace")
    return f"{request.path}?{query}" if query else request.path


def create_app(config: AppConfig | None = None) -> Flask:
    config = config or load_app_config(BASE_DIR)

    store = ListStore(config.data_file, backups=config.product_backups)
    store.ensure_initialized()
    catalog = ProductCatalog(store, strict_filters=config.strict_filters)
    request_log = RequestLog(config.log_file)

    app = Flask(__name__)
    app.config.update(GROCERY=config)
    app.json.sort_keys = False
    app.extensions["product_catalog"] = catalog
    app.extensions["request_log"] = request_log

    CORS(app, resources={r"/*": {"origins": list(config.allowed_origins)}})
    Talisman(app, content_security_policy=None, force_https=config.force_tls)

    # -----------------------------------------------------------------------
    # Request log
    # -----------------------------------------------------------------------
    @app.before_request
    def log_request():
        request_log.append(request.method, _request_target())

    # -----------------------------------------------------------------------
    # Routes: products
    # -----------------------------------------------------------------------
    @app.route("/products", methods=["GET"])
    def list_products():
        filters = ProductFilters.from_args(request.args)
        return jsonify(catalog.list(filters))

    @app.route("/products/<product_id>", methods=["GET"])
    def get_product(product_id):
        return jsonify(catalog.get(product_id))

    @app.route("/products", methods=["POST"])
    def create_product():
        payload = request.get_json(silent=True)
        return jsonify(catalog.create(payload)), 201

    @app.route("/products/<product_id>", methods=["PUT"])
    def update_product(product_id):
        payload = request.get_json(silent=True)
        return jsonify(catalog.update(product_id, payload))

    @app.route("/products/<product_id>", methods=["DELETE"])
    def delete_product(product_id):
        catalog.delete(product_id)
        return "", 204

    # -----------------------------------------------------------------------
    # Error handling
    # -----------------------------------------------------------------------
    @app.errorhandler(ProductError)
    def handle_product_error(exc: ProductError):
        return jsonify({"error": exc.message}), exc.status_code

    @app.errorhandler(StoreError)
    def handle_store_error(exc: StoreError):
        app.logger.error("Storage failure on %s %s", request.method, request.path, exc_info=exc)
        return jsonify({"error": "Internal Server Error"}), 500

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        if isinstance(exc, HTTPException):
            return exc
        app.logger.error("Unhandled error on %s %s", request.method, request.path, exc_info=exc)
        return jsonify({"error": "Internal Server Error"}), 500

    return app


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    settings = load_app_config(BASE_DIR)
    application = create_app(settings)
    application.logger.info("Server is running on http://%s:%s", settings.host, settings.port)
    application.run(host=settings.host, port=settings.port)
