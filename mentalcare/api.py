from flask import Blueprint, g, jsonify, request

from .app import services
from .errors import ValidationError
from .profile import update_profile

bp = Blueprint("api", __name__, url_prefix="/api")


def _payload():
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    return request.form


def _with_user(raw):
    data = {k: raw.get(k) for k in raw.keys()}
    # a signed-in caller may only act on their own conversation
    if data.get("userId") and data["userId"] != g.user_id:
        raise ValidationError(["userId"], user_message="Invalid user.")
    data["userId"] = g.user_id
    return data


@bp.route("/messages", methods=["POST"])
def send_message():
    result = services().pipeline.process(_with_user(_payload()))
    return jsonify(result.to_wire()), 200


@bp.route("/messages", methods=["GET"])
def list_messages():
    turns = services().store.list_turns(g.user_id)
    return jsonify({"turns": [t.to_wire() for t in turns]}), 200


@bp.route("/messages", methods=["DELETE"])
def delete_messages():
    deleted = services().pipeline.erase({"userId": g.user_id})
    return jsonify({"deleted": deleted}), 200


@bp.route("/profile", methods=["GET"])
def get_profile():
    profile = services().store.get_profile(g.user_id)
    return jsonify(profile.to_wire()), 200


@bp.route("/profile", methods=["POST"])
def save_profile():
    message = update_profile(services().store, g.user_id, _payload())
    return jsonify({"success": message}), 200
