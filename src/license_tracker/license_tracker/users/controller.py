from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.auth_guards import current_user
from ..core.exceptions import AuthenticationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/", endpoint="index")
    def index():
        return render_template("index.html")

    @app.route("/signin", methods=["GET", "POST"], endpoint="signin")
    def signin():
        if current_user() is not None:
            return redirect(url_for("dashboard"))

        if request.method == "POST":
            email = request.form.get("email", "")
            password = request.form.get("password", "")
            remember = request.form.get("remember_me")

            try:
                s_user = container.auth_service.authenticate(email, password)

                session.clear()
                session.permanent = bool(remember)
                session.update(s_user.to_session())

                flash(f"Welcome back, {s_user.name}", "success")
                return redirect(url_for("dashboard"))
            except AuthenticationError as e:
                flash(str(e), "danger")
            except Exception as e:
                logger.exception("Sign-in failed")
                if bool(app.config.get("DEBUG", False)):
                    flash(f"System error while signing in: {e}", "danger")
                else:
                    flash("System error while signing in", "danger")

        return render_template("signin.html", email=request.form.get("email", ""))

    @app.route("/logout", endpoint="logout")
    def logout():
        session.clear()
        flash("You have been logged out", "info")
        return redirect(url_for("signin"))
