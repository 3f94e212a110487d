from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from models import storage  # DBStorage singleton (scoped_session)
from utils.security import PasswordHasher, TokenSigner

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0.0",
    "info": {
        "title": "Profile API",
        "version": "1.0.0",
        "description": "GraphQL API for registering users, managing sessions and sharing profiles.",
    },
    "basePath": "/",
    "schemes": ["http"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def create_app(config_name: str | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app,
    connects the storage and wires the services used by the GraphQL resolvers.
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))

    # Cross-Origin Resource Sharing: enable for dev, configurable for prod
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_error_handlers(app)

    storage.reload(app.config["DATABASE_URL"], echo=app.config["SQL_ECHO"])

    from .services import AuthService

    hasher = PasswordHasher.from_config(app.config)
    signer = TokenSigner.from_config(app.config)
    app.extensions["profile_api"] = {
        "storage": storage,
        "token_signer": signer,
        "auth_service": AuthService(storage, hasher, signer),
    }

    from .health import bp as health_bp
    from .graphql_api import bp as graphql_bp

    app.register_blueprint(health_bp, url_prefix="/api/v1")
    app.register_blueprint(graphql_bp)

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        # This calls scoped_session.remove(), preventing connection leaks
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Profile API",
            "graphql": "/graphql",
            "docs": "/apidocs/",
            "health": "/api/v1/health",
        }, 200

    return app
