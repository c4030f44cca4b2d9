from flask import Blueprint, current_app, flash, g, jsonify, redirect, render_template, request

from . import auth
from .app import services
from .errors import MentalCareError
from .profile import update_profile

bp = Blueprint("pages", __name__)

ACCOUNT_CREATED = "Account created. Please sign in."


def _form():
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    return request.form


@bp.route("/", methods=["GET"])
def index():
    # the access policy always redirects "/" before it gets here
    return redirect("/login")


@bp.route("/login", methods=["GET"])
def login():
    firebase_config = {
        "apiKey": current_app.config["FIREBASE_WEB_API_KEY"],
        "authDomain": current_app.config["FIREBASE_AUTH_DOMAIN"],
        "projectId": current_app.config["FIREBASE_PROJECT_ID"],
    }
    return render_template("login.html", firebase_config=firebase_config)


@bp.route("/chat", methods=["GET"])
def chat():
    turns = services().store.list_turns(g.user_id)
    return render_template("chat.html", turns=turns)


@bp.route("/chat", methods=["POST"])
def chat_submit():
    result = services().pipeline.send_message({
        "message": request.form.get("message"),
        "userId": g.user_id,
    })
    if result.get("error"):
        flash(result["error"], "error")
    elif result.get("referralMessage"):
        flash(result["referralMessage"], "referral")
    return redirect("/chat")


@bp.route("/chat/delete", methods=["POST"])
def chat_delete():
    result = services().pipeline.delete_history({"userId": g.user_id})
    if result.get("error"):
        flash(result["error"], "error")
    return redirect("/chat")


@bp.route("/profile", methods=["GET"])
def profile():
    current = services().store.get_profile(g.user_id)
    return render_template("profile.html", profile=current)


@bp.route("/profile", methods=["POST"])
def profile_submit():
    try:
        message = update_profile(services().store, g.user_id, request.form)
    except MentalCareError as e:
        flash(e.user_message, "error")
        return redirect("/profile")
    flash(message, "success")
    return redirect("/chat")


def _set_session_cookie(response, cookie):
    response.set_cookie(
        current_app.config["SESSION_COOKIE"],
        cookie,
        max_age=current_app.config["SESSION_DAYS"] * 24 * 3600,
        httponly=True,
        secure=current_app.config["SESSION_COOKIE_SECURE"],
        samesite="Lax",
    )
    return response


@bp.route("/session", methods=["POST"])
def session_login():
    id_token = _form().get("idToken", "")
    services().ensure_firebase()
    if request.is_json:
        cookie = auth.create_session(id_token, current_app.config["SESSION_DAYS"])
        return _set_session_cookie(jsonify({"status": "ok"}), cookie)

    # login page form post
    try:
        cookie = auth.create_session(id_token, current_app.config["SESSION_DAYS"])
    except MentalCareError as e:
        flash(e.user_message, "error")
        return redirect("/login")
    return _set_session_cookie(redirect("/chat"), cookie)


@bp.route("/signup", methods=["POST"])
def signup():
    services().ensure_firebase()
    if request.is_json:
        uid = auth.sign_up(_form())
        return jsonify({"uid": uid}), 201

    try:
        auth.sign_up(request.form)
    except MentalCareError as e:
        flash(e.user_message, "error")
        return redirect("/login")
    flash(ACCOUNT_CREATED, "success")
    return redirect("/login")


@bp.route("/signout", methods=["POST"])
def signout():
    if g.user_id:
        auth.sign_out(g.user_id)
    response = redirect("/login")
    response.delete_cookie(current_app.config["SESSION_COOKIE"])
    return response
