from flask import Flask
from werkzeug.exceptions import HTTPException
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from sqlalchemy import create_engine, select
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from dotenv import load_dotenv
from typing import Optional, Dict, Any
import logging

load_dotenv()

db_engine = None
SessionLocal = None
jwt = JWTManager()


@jwt.token_in_blocklist_loader
def _token_revoked(jwt_header, jwt_payload) -> bool:
    from .models.authz import RevokedToken
    jti = jwt_payload.get('jti')
    return get_db().execute(select(RevokedToken.id).where(RevokedToken.jti == jti)).first() is not None


def create_app(config: Optional[Dict[str, Any]] = None):
    global db_engine, SessionLocal
    from .config.settings import default_settings
    app = Flask(__name__)

    app.config.update(default_settings())
    if config:
        # allow tests or callers to override default config values
        app.config.update(config)

    logging.getLogger(__name__).setLevel(app.config['LOG_LEVEL'])

    # Database
    db_url = app.config['DATABASE_URL']
    if db_url.endswith(':memory:'):
        # Ensure a single shared in-memory SQLite database across all sessions
        db_engine = create_engine(
            db_url,
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        db_engine = create_engine(db_url, echo=False, future=True)
    SessionLocal = scoped_session(sessionmaker(bind=db_engine, expire_on_commit=False, autoflush=False))

    @app.teardown_appcontext
    def remove_session(exc):  # type: ignore
        SessionLocal.remove()

    jwt.init_app(app)

    from .services.storage import LocalObjectStorage
    app.extensions['object_storage'] = LocalObjectStorage(app.config['UPLOAD_DIR'], app.config['MEDIA_URL_PREFIX'])

    # The promotion function is called cross-origin from the admin console
    CORS(
        app,
        resources={r"/functions/*": {"origins": "*"}},
        send_wildcard=True,
        allow_headers=['authorization', 'x-client-info', 'apikey', 'content-type'],
    )

    from .routes.auth import auth_bp
    from .routes.tickets import tickets_bp
    from .routes.profiles import profiles_bp
    from .routes.admin import admin_bp
    from .routes.media import media_bp
    from .routes.functions import functions_bp
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(tickets_bp, url_prefix='/tickets')
    app.register_blueprint(profiles_bp, url_prefix='/profiles')
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(media_bp, url_prefix=app.config['MEDIA_URL_PREFIX'])
    app.register_blueprint(functions_bp, url_prefix='/functions')

    @app.route('/healthz')
    def health():
        return {'status': 'ok'}

    # Unified error handler producing standardized JSON shape
    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, HTTPException):
            payload = {
                'error': {
                    'status': e.code,
                    'title': e.name,
                    'detail': e.description,
                }
            }
            return payload, e.code
        # Unhandled exception
        app.logger.exception('Unhandled exception')
        return {
            'error': {
                'status': 500,
                'title': 'Internal Server Error',
                'detail': 'Unexpected error'
            }
        }, 500

    from .openapi import build_openapi_spec

    @app.route('/openapi.json')
    def openapi_spec():
        return build_openapi_spec()

    @app.route('/docs')
    def docs_index():
        # Lightweight HTML referencing Redoc CDN (no local install) for quick browsing
        return (
            "<!DOCTYPE html><html><head><title>BroResolve API Docs</title>"
            "<link rel=\"stylesheet\" href=\"https://cdn.jsdelivr.net/npm/redoc@next/bundles/redoc.standalone.css\" />"
            "</head><body><redoc spec-url='/openapi.json'></redoc>"
            "<script src='https://cdn.jsdelivr.net/npm/redoc@next/bundles/redoc.standalone.js'></script>"
            "</body></html>"
        )

    app.logger.info('BroResolve app created (db=%s)', db_url.split('://', 1)[0])
    return app


def get_db():
    return SessionLocal()
