from __future__ import annotations

from flask import Flask, render_template

from ..common.auth_guards import current_user, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        view = container.dashboard_service.build(current_user=current_user())
        return render_template("dashboard.html", view=view, active_page="dashboard")
