from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, url_for

from ..common.auth_guards import current_user, login_required
from ..core.exceptions import NotFoundError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/notifications", endpoint="notifications")
    @login_required
    def notifications():
        inbox = container.notification_service.list_for_user(user_id=current_user().user_id)
        return render_template("notifications/index.html", inbox=inbox, active_page="notifications")

    @app.route("/notifications/<int:notification_id>/read", methods=["POST"], endpoint="mark_notification_read")
    @login_required
    def mark_notification_read(notification_id: int):
        try:
            container.notification_service.mark_as_read(
                user_id=current_user().user_id,
                notification_id=notification_id,
            )
        except NotFoundError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Marking notification %s as read failed", notification_id)
            flash("System error while updating the notification", "danger")
        return redirect(url_for("notifications"))

    @app.route("/notifications/clear", methods=["POST"], endpoint="clear_notifications")
    @login_required
    def clear_notifications():
        try:
            container.notification_service.clear_all(user_id=current_user().user_id)
            flash("All notifications cleared", "info")
        except Exception:
            logger.exception("Clearing notifications failed")
            flash("System error while clearing notifications", "danger")
        return redirect(url_for("notifications"))
