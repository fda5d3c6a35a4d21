"""Session helpers and role guards shared by the controllers."""

from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import flash, redirect, render_template, session, url_for

from ..core.enums import Role
from ..users.service import SessionUser


def current_user() -> Optional[SessionUser]:
    if "user_id" not in session:
        return None
    try:
        return SessionUser.from_session(session)
    except (KeyError, ValueError):
        session.clear()
        return None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            flash("Please sign in to continue", "warning")
            return redirect(url_for("signin"))
        return view(*args, **kwargs)

    return wrapper


def role_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = current_user()
            if user is None:
                flash("Please sign in to continue", "warning")
                return redirect(url_for("signin"))
            if user.role.value not in allowed:
                return render_template("403.html", current_user=user), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator
