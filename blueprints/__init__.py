"""
Blueprint registration for the wedding site API.

All blueprints carry full /api/... paths and are registered without URL prefixes.
"""

from __future__ import annotations


def register_blueprints(app):
    from blueprints.wedding import bp as wedding_bp
    from blueprints.photos import bp as photos_bp
    from blueprints.playlist import bp as playlist_bp
    from blueprints.metadata import bp as metadata_bp
    from blueprints.schedule import bp as schedule_bp

    app.register_blueprint(wedding_bp)
    app.register_blueprint(photos_bp)
    app.register_blueprint(playlist_bp)
    app.register_blueprint(metadata_bp)
    app.register_blueprint(schedule_bp)
