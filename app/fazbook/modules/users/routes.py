from __future__ import annotations

from flask import Blueprint, abort, current_app, redirect, render_template, request, url_for

from app.fazbook.modules.users.service import UserPayload
from app.fazbook.modules.users.store import user_store

bp = Blueprint("users", __name__)


def _strict_not_found() -> bool:
    return bool(current_app.config.get("USERS_STRICT_NOT_FOUND", True))


# ---------- List ----------
# "" is registered first so url_for builds the bare prefix.
@bp.get("/")
@bp.get("")
def users_list():
    users = user_store().find_all()
    return render_template("users/index.html", title="Fazbook EveryBody", users=users)


# ---------- New ----------
@bp.get("/new")
def users_new():
    return render_template("users/new.html", title="New Users")


@bp.post("/")
@bp.post("")
def users_create():
    payload = UserPayload.from_form(request.form)
    user_store().create(payload)
    return redirect(url_for("users.users_list"))


# ---------- Delete ----------
@bp.delete("/<int:user_id>")
def users_delete(user_id: int):
    # Idempotent: a missing row still redirects.
    user_store().destroy(user_id)
    return redirect(url_for("users.users_list"))


# ---------- Detail ----------
@bp.get("/<int:user_id>")
def users_show(user_id: int):
    user = user_store().find_by_id(user_id)
    if user is None and _strict_not_found():
        abort(404)
    return render_template("users/show.html", title="My Profile", user=user)


# ---------- Edit ----------
@bp.get("/<int:user_id>/edit")
def users_edit(user_id: int):
    user = user_store().find_by_id(user_id)
    if user is None and _strict_not_found():
        abort(404)
    return render_template("users/edit.html", title="Edit Profile", user=user)


@bp.put("/<int:user_id>")
def users_update(user_id: int):
    payload = UserPayload.from_form(request.form)
    user = user_store().update(user_id, payload)
    if user is None and _strict_not_found():
        abort(404)
    return redirect(url_for("users.users_show", user_id=user_id))
