#!/usr/bin/env python3
"""
Flappy Push-up ranking server.
HTTP/JSON front for the RankingService, backed by SQLite.
"""

import logging

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .config import Config
from .errors import StorageUnavailable, ValidationError
from .ranking import RankingService
from .server_db import Database

api = Blueprint('api', __name__)


def get_service() -> RankingService:
    return current_app.extensions['ranking']


@api.route('/leaderboard', methods=['GET'])
def leaderboard():
    entries = get_service().list()
    return jsonify({'leaderboard': [e.to_dict() for e in entries]})


@api.route('/score', methods=['POST'])
def submit_score():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    result = get_service().submit(data.get('name'), data.get('score'))
    return jsonify(result.to_dict())


@api.route('/stats', methods=['GET'])
def stats():
    return jsonify(get_service().stats().to_dict())


@api.route('/health', methods=['GET'])
def health():
    return jsonify({'status': 'ok'})


def register_error_handlers(flask_app):
    @flask_app.errorhandler(ValidationError)
    def handle_validation(exc):
        return jsonify({'error': exc.message}), 400

    @flask_app.errorhandler(StorageUnavailable)
    def handle_storage(exc):
        flask_app.logger.error(f"Storage failure: {exc}")
        return jsonify({'error': 'Storage unavailable'}), 503

    @flask_app.errorhandler(HTTPException)
    def handle_http(exc):
        message = 'Not found' if exc.code in (404, 405) else exc.name
        return jsonify({'error': message}), 404 if exc.code == 405 else exc.code

    @flask_app.errorhandler(Exception)
    def handle_unexpected(exc):
        flask_app.logger.exception(f"Unhandled error: {exc}")
        return jsonify({'error': 'Internal server error'}), 500


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    origins = flask_app.config.get('CORS_ORIGINS', '*')
    if origins != '*':
        origins = [o.strip() for o in origins.split(',') if o.strip()]
    CORS(flask_app, origins=origins, send_wildcard=(origins == '*'),
         methods=['GET', 'POST', 'OPTIONS'], allow_headers=['Content-Type'])

    db = Database(flask_app.config['DATABASE_PATH'])
    flask_app.extensions['ranking'] = RankingService(db)

    flask_app.register_blueprint(api, url_prefix='/api')
    register_error_handlers(flask_app)

    return flask_app


def main():
    logging.basicConfig(
        level=Config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = create_app()
    app.logger.info(f"Ranking server on http://{Config.HOST}:{Config.PORT}")
    app.run(host=Config.HOST, port=Config.PORT, threaded=True)


if __name__ == "__main__":
    main()
