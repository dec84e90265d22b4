"""Song-request playlist routes."""

from __future__ import annotations

from typing import Optional

from flask import Blueprint, jsonify

from helpers import json_body, json_error, require_id, user_session
from schemas import FieldError
from storage import get_storage
from validation import sanitize_string

bp = Blueprint("playlist", __name__)


def split_suggestion(suggestion: str) -> tuple[Optional[str], str]:
    """Split "Artist - Title" into ``(artist, title)``; otherwise the whole text is the title."""
    parts = suggestion.split(" - ")
    if len(parts) == 2 and parts[0].strip() and parts[1].strip():
        return parts[0].strip(), parts[1].strip()
    return None, suggestion


@bp.route("/api/playlist")
def api_playlist():
    return jsonify(get_storage().list_songs())


@bp.route("/api/playlist", methods=["POST"])
def api_add_song():
    data = json_body()
    raw = data.get("suggestion")
    if not isinstance(raw, str) or not raw.strip():
        return json_error("Invalid data", errors=[FieldError("suggestion", "Required").to_dict()])

    suggestion = sanitize_string(raw, max_length=500)
    artist, title = split_suggestion(suggestion)
    if isinstance(data.get("title"), str) and data["title"].strip():
        title = data["title"]
    if isinstance(data.get("artist"), str) and data["artist"].strip():
        artist = data["artist"]

    song = get_storage().create_song({
        "suggestion": suggestion,
        "title": sanitize_string(title),
        "artist": sanitize_string(artist) or None,
    })
    return jsonify(song)


@bp.route("/api/playlist/<song_id>/like", methods=["POST"])
def api_like_song(song_id):
    result = get_storage().toggle_song_like(require_id(song_id), user_session())
    if result is None:
        return json_error("Song not found", 404)
    return jsonify(result)


@bp.route("/api/playlist/<song_id>", methods=["DELETE"])
def api_delete_song(song_id):
    if not get_storage().delete_song(require_id(song_id)):
        return json_error("Song not found", 404)
    return jsonify({"message": "Song deleted successfully"})
