"""Photo gallery routes: listing, upload, likes, comments, moderation."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from flask import Blueprint, current_app, jsonify, request, send_from_directory

from helpers import json_body, json_error, paginated_response, parse_bool_arg, require_id, user_session
from sanitize import sanitize_filename
from storage import get_storage
from validation import describe_upload, sanitize_string, validate_image_file, validate_pagination

logger = logging.getLogger(__name__)

bp = Blueprint("photos", __name__)

MAX_COMMENT_LENGTH = 1000


def _upload_dir() -> Path:
    folder = Path(current_app.config["UPLOAD_FOLDER"])
    folder.mkdir(parents=True, exist_ok=True)
    return folder


def _unique_filename(folder: Path, original: str) -> str:
    filename = sanitize_filename(original) or "photo"
    if (folder / filename).exists():
        stem = Path(filename).stem
        suffix = Path(filename).suffix
        filename = f"{stem}_{uuid.uuid4().hex[:6]}{suffix}"
    return filename


@bp.route("/api/photos")
def api_photos():
    store = get_storage()
    approved = parse_bool_arg("approved")

    if "page" not in request.args and "limit" not in request.args:
        return jsonify(store.list_photos(approved))

    bounds = validate_pagination(request.args.get("page"), request.args.get("limit"))
    page, limit = bounds["page"], bounds["limit"]
    items = store.list_photos(approved, limit=limit, offset=(page - 1) * limit)
    return jsonify(paginated_response(items, store.count_photos(approved), page, limit))


@bp.route("/api/photos/upload", methods=["POST"])
def api_upload_photos():
    files = [f for f in request.files.getlist("photos") if f]
    if not files:
        return json_error("No files uploaded")

    max_files = current_app.config.get("MAX_UPLOAD_FILES", 10)
    if len(files) > max_files:
        return json_error(f"Too many files. Maximum is {max_files} per upload")

    store = get_storage()
    details = store.get_wedding_details() or {}
    if details.get("allowUploads") is False:
        return json_error("Photo uploads are disabled", 403)

    folder = _upload_dir()
    created = []
    errors = []
    for file in files:
        result = validate_image_file(describe_upload(file))
        if not result:
            errors.append({"field": sanitize_string(file.filename), "message": result.error})
            continue

        filename = _unique_filename(folder, file.filename)
        file.save(str(folder / filename))
        url = f"/uploads/{filename}"
        created.append(store.create_photo({
            "filename": filename,
            "originalName": sanitize_string(file.filename),
            "url": url,
            "thumbnailUrl": url,
            "approved": not details.get("moderateUploads", False),
        }))

    if errors:
        logger.warning("Rejected %d of %d uploaded file(s)", len(errors), len(files))
    if not created:
        return json_error(errors[0]["message"], errors=errors)

    logger.info("Stored %d photo(s)", len(created))
    return jsonify(created)


@bp.route("/api/photos/<photo_id>/like", methods=["POST"])
def api_like_photo(photo_id):
    result = get_storage().toggle_photo_like(require_id(photo_id), user_session())
    if result is None:
        return json_error("Photo not found", 404)
    return jsonify(result)


@bp.route("/api/photos/<photo_id>", methods=["DELETE"])
def api_delete_photo(photo_id):
    photo = get_storage().delete_photo(require_id(photo_id))
    if photo is None:
        return json_error("Photo not found", 404)

    path = Path(current_app.config["UPLOAD_FOLDER"]) / photo["filename"]
    if path.is_file():
        path.unlink()
    return jsonify({"message": "Photo deleted successfully"})


@bp.route("/api/photos/<photo_id>/approve", methods=["PATCH"])
def api_approve_photo(photo_id):
    if get_storage().approve_photo(require_id(photo_id)) is None:
        return json_error("Photo not found", 404)
    return jsonify({"message": "Photo approved successfully"})


@bp.route("/api/photos/<photo_id>/comments")
def api_photo_comments(photo_id):
    return jsonify(get_storage().list_photo_comments(require_id(photo_id)))


@bp.route("/api/photos/<photo_id>/comments", methods=["POST"])
def api_add_photo_comment(photo_id):
    photo_id = require_id(photo_id)
    data = json_body()
    author = data.get("author")
    text = data.get("text")
    author = sanitize_string(author) if isinstance(author, str) else ""
    text = sanitize_string(text, max_length=MAX_COMMENT_LENGTH) if isinstance(text, str) else ""
    if not author or not text:
        return json_error("Author and text are required")

    comment = get_storage().add_photo_comment(photo_id, author, text)
    if comment is None:
        return json_error("Photo not found", 404)
    return jsonify(comment)


@bp.route("/uploads/<path:filename>")
def uploaded_file(filename):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
