"""Wedding details routes."""

from __future__ import annotations

import logging

from flask import Blueprint, jsonify

from helpers import json_body, validation_error
from schemas import WeddingDetailsUpdate
from storage import DEFAULT_WEDDING_DETAILS, get_storage

logger = logging.getLogger(__name__)

bp = Blueprint("wedding", __name__)


def _details_or_default():
    store = get_storage()
    details = store.get_wedding_details()
    if details is None:
        logger.info("No wedding details yet, creating defaults")
        details = store.create_wedding_details(dict(DEFAULT_WEDDING_DETAILS))
    return details


@bp.route("/api/wedding-details")
def api_wedding_details():
    return jsonify(_details_or_default())


@bp.route("/api/wedding-details", methods=["PATCH"])
def api_update_wedding_details():
    update = WeddingDetailsUpdate.from_json(json_body())
    errors = update.validate()
    if errors:
        return validation_error(errors)

    _details_or_default()
    return jsonify(get_storage().update_wedding_details(update.to_payload()))
