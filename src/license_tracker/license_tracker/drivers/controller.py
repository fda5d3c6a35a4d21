from __future__ import annotations

import logging
from datetime import date

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.auth_guards import current_user, role_required
from ..core.enums import DriverStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)

# Form fields posted by the driver form.
_FORM_FIELDS = (
    "name",
    "email",
    "phone",
    "address",
    "license_number",
    "license_type",
    "license_expiry_date",
    "penalty_points",
    "employee_id",
    "department",
    "status",
    "image_url",
    "license_image_url",
    "notes",
)


def _form_data() -> dict:
    return {key: request.form.get(key, "") for key in _FORM_FIELDS if key in request.form}


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/drivers", endpoint="driver_management")
    @role_required(Role.ADMIN)
    def driver_management():
        search = request.args.get("search", "")
        department = request.args.get("department", "all")
        status = request.args.get("status", "all")
        try:
            page = container.driver_service.list_drivers(
                search=search,
                department=department,
                status=status,
                page=request.args.get("page", 1),
            )
        except ValidationError as e:
            flash(str(e), "danger")
            return redirect(url_for("driver_management"))

        return render_template(
            "admin/drivers.html",
            page=page,
            search=search,
            department=department,
            status=status,
            statuses=[s.value for s in DriverStatus],
            today=date.today(),
            active_page="driver_management",
        )

    @app.route("/admin/drivers/new", methods=["GET", "POST"], endpoint="add_driver")
    @role_required(Role.ADMIN)
    def add_driver():
        form = _form_data()
        if request.method == "POST":
            try:
                container.driver_service.add_driver(current_role=current_user().role, data=form)
                flash(f"Driver {form.get('name', '').strip()} has been added", "success")
                return redirect(url_for("driver_management"))
            except (ValidationError, AuthorizationError) as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Adding driver failed")
                flash("System error while adding the driver", "danger")

        return render_template(
            "admin/driver_form.html",
            driver=None,
            form=form,
            statuses=[s.value for s in DriverStatus],
            active_page="driver_management",
        )

    @app.route("/admin/drivers/<int:driver_id>", endpoint="driver_details")
    @role_required(Role.ADMIN)
    def driver_details(driver_id: int):
        try:
            driver = container.driver_service.get_driver(driver_id)
        except NotFoundError as e:
            flash(str(e), "danger")
            return render_template("admin/driver_not_found.html", active_page="driver_management"), 404

        return render_template(
            "admin/driver_details.html",
            driver=driver,
            info=container.driver_service.expiry_info(driver, date.today()),
            licenses=container.driver_service.driver_licenses(driver),
            active_page="driver_management",
        )

    @app.route("/admin/drivers/<int:driver_id>/edit", methods=["GET", "POST"], endpoint="edit_driver")
    @role_required(Role.ADMIN)
    def edit_driver(driver_id: int):
        try:
            driver = container.driver_service.get_driver(driver_id)
        except NotFoundError as e:
            flash(str(e), "danger")
            return redirect(url_for("driver_management"))

        form = _form_data()
        if request.method == "POST":
            try:
                updated = container.driver_service.update_driver(
                    current_role=current_user().role,
                    driver_id=driver_id,
                    data=form,
                )
                flash(f"Driver {updated.name} has been updated", "success")
                return redirect(url_for("driver_details", driver_id=driver_id))
            except (ValidationError, AuthorizationError, NotFoundError) as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Updating driver %s failed", driver_id)
                flash("System error while updating the driver", "danger")

        return render_template(
            "admin/driver_form.html",
            driver=driver,
            form=form,
            statuses=[s.value for s in DriverStatus],
            active_page="driver_management",
        )

    @app.route("/admin/drivers/<int:driver_id>/delete", methods=["POST"], endpoint="delete_driver")
    @role_required(Role.ADMIN)
    def delete_driver(driver_id: int):
        try:
            deleted = container.driver_service.delete_driver(current_role=current_user().role, driver_id=driver_id)
            flash(f"Driver {deleted.name} has been deleted", "success")
        except (ValidationError, AuthorizationError, NotFoundError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Deleting driver %s failed", driver_id)
            flash("System error while deleting the driver", "danger")
        return redirect(url_for("driver_management"))

    @app.route("/penalty-points", methods=["POST"], endpoint="report_penalty_points")
    @role_required(Role.DRIVER)
    def report_penalty_points():
        try:
            report = container.driver_service.report_penalty_points(
                current_user=current_user(),
                points=request.form.get("points", ""),
                reason=request.form.get("reason", ""),
            )
            if report.exceeded_limit:
                flash("You now exceed the maximum penalty points. Consider consulting your manager.", "warning")
            elif report.high_risk:
                flash(
                    f"You now have {report.total_points} penalty points. This is considered high risk.",
                    "warning",
                )
            else:
                flash(f"Added {report.points_added} penalty points to your record", "success")
        except (ValidationError, AuthorizationError, NotFoundError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Reporting penalty points failed")
            flash("System error while reporting penalty points", "danger")
        return redirect(url_for("dashboard"))
