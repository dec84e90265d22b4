"""Wedding-day schedule routes."""

from __future__ import annotations

from flask import Blueprint, jsonify

from helpers import json_body, json_error, require_id, validation_error
from schemas import ScheduleItemRequest, ScheduleItemUpdate
from storage import get_storage

bp = Blueprint("schedule", __name__)


@bp.route("/api/schedule")
def api_schedule():
    return jsonify(get_storage().list_schedule())


@bp.route("/api/schedule", methods=["POST"])
def api_create_schedule_item():
    item = ScheduleItemRequest.from_json(json_body())
    errors = item.validate()
    if errors:
        return validation_error(errors)
    return jsonify(get_storage().create_schedule_item(item.to_payload()))


@bp.route("/api/schedule/<item_id>", methods=["PATCH"])
def api_update_schedule_item(item_id):
    update = ScheduleItemUpdate.from_json(json_body())
    errors = update.validate()
    if errors:
        return validation_error(errors)

    item = get_storage().update_schedule_item(require_id(item_id), update.to_payload())
    if item is None:
        return json_error("Schedule item not found", 404)
    return jsonify(item)


@bp.route("/api/schedule/<item_id>", methods=["DELETE"])
def api_delete_schedule_item(item_id):
    if not get_storage().delete_schedule_item(require_id(item_id)):
        return json_error("Schedule item not found", 404)
    return jsonify({"message": "Schedule item deleted successfully"})
