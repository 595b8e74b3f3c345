# blog_api/__init__.py

# =====================================================================================
# 1. Environment variables (loaded before anything reads them)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. Module imports
# =====================================================================================
import os
import logging
from flask import Flask
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

# - settings
from blog_api.core.config import config_by_name
from blog_api.core.firebase import FirebaseClients

# - API blueprints
from blog_api.api.auth.routes import auth_bp
from blog_api.api.posts.routes import posts_bp

# - services and repositories
from blog_api.api.auth.services import AuthService
from blog_api.api.posts.services import PostService
from blog_api.repositories.auth_repository import AuthRepository
from blog_api.repositories.post_repository import PostRepository
from blog_api.services.identity_toolkit_service import IdentityToolkitClient
from blog_api.utils.response_utils import error_response, validation_error


def create_app(config_name=None, clients=None, identity_client=None):
    """
    Flask application factory.

    ``clients`` (FirebaseClients) and ``identity_client`` (IdentityToolkitClient)
    are built from the configuration when not supplied; tests pass in-memory
    doubles instead.
    """
    # =====================================================================================
    # 3. Flask app and configuration
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False
    app.json.sort_keys = False

    # =====================================================================================
    # 4. External clients, constructed once per app
    # =====================================================================================
    if clients is None:
        clients = FirebaseClients.from_config(app.config)
    if identity_client is None:
        identity_client = IdentityToolkitClient(
            api_key=app.config['FIREBASE_API_KEY'],
            base_url=app.config['IDENTITY_TOOLKIT_URL'],
            timeout=app.config['IDENTITY_TOOLKIT_TIMEOUT']
        )

    # =====================================================================================
    # 5. Services stored on app.services (dependency injection)
    # =====================================================================================
    app.services = {}

    # 5-1. Repositories over the shared clients
    auth_repository = AuthRepository(clients.db, clients.auth, identity_client)
    post_repository = PostRepository(clients.db)

    # 5-2. Domain services; posts depend on auth for token verification
    app.services['auth'] = AuthService(auth_repository)
    app.services['posts'] = PostService(post_repository, app.services['auth'])

    # =====================================================================================
    # 6. Blueprints
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(posts_bp, url_prefix='/api/posts')

    # =====================================================================================
    # 7. Global error handlers
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        return validation_error(err.messages)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        return error_response(err.description or err.name, err.code)

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # Anything no other handler picked up
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        return error_response("Internal server error", 500)

    # =====================================================================================
    # 8. Logging
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
