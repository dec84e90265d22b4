"""Site metadata routes, addressed by ``metaKey``."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from helpers import json_body, json_error, validation_error
from schemas import CreateMetadataRequest, UpdateMetadataRequest
from storage import get_storage

bp = Blueprint("metadata", __name__)


@bp.route("/api/metadata")
def api_metadata():
    return jsonify(get_storage().list_metadata(request.args.get("key") or None))


@bp.route("/api/metadata/<key>")
def api_metadata_by_key(key):
    record = get_storage().get_metadata(key)
    if record is None:
        return json_error("Metadata not found", 404)
    return jsonify(record)


@bp.route("/api/metadata", methods=["POST"])
def api_set_metadata():
    create = CreateMetadataRequest.from_json(json_body())
    errors = create.validate()
    if errors:
        return validation_error(errors)
    return jsonify(get_storage().set_metadata(create.to_payload()))


@bp.route("/api/metadata/<key>", methods=["PATCH"])
def api_update_metadata(key):
    update = UpdateMetadataRequest.from_json(json_body())
    errors = update.validate()
    if errors:
        return validation_error(errors)

    try:
        record = get_storage().update_metadata(key, update.to_payload())
    except ValueError as e:
        return json_error(str(e), 409)
    if record is None:
        return json_error(f"Site metadata with key '{key}' not found", 404)
    return jsonify(record)


@bp.route("/api/metadata/<key>", methods=["DELETE"])
def api_delete_metadata(key):
    if not get_storage().delete_metadata(key):
        return json_error("Metadata not found", 404)
    return jsonify({"message": "Metadata deleted successfully"})
