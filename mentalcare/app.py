import logging

from flask import Flask, current_app, g, jsonify, redirect, request
from flask_cors import CORS

from . import access, auth, config
from .errors import MentalCareError
from .firebase import get_db, init_firebase
from .llm import get_model
from .pipeline import MessagePipeline
from .store import ConversationStore

logger = logging.getLogger(__name__)


class Services:
    """Lazily built, process-wide collaborators shared by every request."""

    def __init__(self, settings, db=None, model=None):
        self.settings = settings
        self._db = db
        self._model = model
        self._store = None
        self._pipeline = None

    def ensure_firebase(self):
        if self._db is None:
            init_firebase(self.settings.get("FIREBASE_CREDENTIALS"))

    @property
    def db(self):
        if self._db is None:
            self._db = get_db(self.settings.get("FIREBASE_CREDENTIALS"))
        return self._db

    @property
    def model(self):
        if self._model is None:
            self._model = get_model(self.settings)
        return self._model

    @property
    def store(self):
        if self._store is None:
            self._store = ConversationStore(
                self.db,
                collection=self.settings.get("CONVERSATIONS_COLLECTION", "conversations"),
                users_collection=self.settings.get("USERS_COLLECTION", "users"),
            )
        return self._store

    @property
    def pipeline(self):
        if self._pipeline is None:
            self._pipeline = MessagePipeline(
                self.model, self.store, mode=self.settings.get("PIPELINE_MODE", "staged")
            )
        return self._pipeline


def services() -> Services:
    return current_app.extensions["mentalcare"]


def create_app(overrides=None, db=None, model=None):
    app = Flask(__name__)
    app.config.from_mapping(config.as_mapping())
    if overrides:
        app.config.update(overrides)
    app.secret_key = app.config["SECRET_KEY"]

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    CORS(app, supports_credentials=True, resources={r"/*": {"origins": app.config["CORS_ORIGINS"]}})

    app.extensions["mentalcare"] = Services(app.config, db=db, model=model)

    @app.before_request
    def guard():
        cookie_name = app.config["SESSION_COOKIE"]
        g.user_id = None
        if auth.has_credentials(request, cookie_name):
            services().ensure_firebase()
            g.user_id = auth.resolve_user_id(request, cookie_name)

        decision = access.decide(g.user_id is not None, request.path)
        if decision.allowed:
            return None
        if decision.action == "redirect":
            return redirect(decision.target)
        return jsonify({"error": "Authentication required."}), 401

    @app.errorhandler(MentalCareError)
    def handle_mentalcare_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.route("/health", methods=["GET"])
    def health():
        return {"status": "ok"}, 200

    from .api import bp as api_bp
    from .pages import bp as pages_bp

    app.register_blueprint(api_bp)
    app.register_blueprint(pages_bp)

    return app
