from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.auth_guards import current_user, role_required
from ..core.enums import LicenseStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/license-upload", methods=["GET", "POST"], endpoint="license_upload")
    @role_required(Role.DRIVER)
    def license_upload():
        user = current_user()
        if request.method == "POST":
            try:
                container.license_service.submit_license(
                    current_user=user,
                    license_type=request.form.get("license_type", ""),
                    license_number=request.form.get("license_number", ""),
                    expiry_date=request.form.get("expiry_date", ""),
                    penalty_points=request.form.get("penalty_points", "0"),
                )
                flash("Your license has been submitted for approval.", "success")
                return redirect(url_for("license_upload"))
            except (ValidationError, AuthorizationError) as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("License submission failed")
                flash("There was an error submitting your license. Please try again.", "danger")

        licenses = container.license_service.driver_licenses(driver_id=user.user_id)
        return render_template(
            "licenses/upload.html",
            pending=[lic for lic in licenses if lic.status == LicenseStatus.PENDING],
            history=[lic for lic in licenses if lic.status != LicenseStatus.PENDING],
            has_pending=any(lic.status == LicenseStatus.PENDING for lic in licenses),
            form=request.form,
            active_page="license_upload",
        )

    @app.route("/manager-approval", endpoint="manager_approval")
    @role_required(Role.MANAGER)
    def manager_approval():
        search = request.args.get("search", "")
        license_type = request.args.get("license_type", "all")
        return render_template(
            "licenses/approval.html",
            licenses=container.license_service.pending_licenses(search=search, license_type=license_type),
            license_types=container.license_service.pending_license_types(),
            search=search,
            license_type=license_type,
            active_page="manager_approval",
        )

    def _decide(license_id: int, status: LicenseStatus):
        try:
            container.license_service.update_license_status(
                current_role=current_user().role,
                license_id=license_id,
                status=status,
            )
            flash(f"License {status.value} successfully", "success")
        except (ValidationError, AuthorizationError, NotFoundError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Reviewing license %s failed", license_id)
            flash("System error while reviewing the license", "danger")
        return redirect(url_for("manager_approval"))

    @app.route("/manager-approval/<int:license_id>/approve", methods=["POST"], endpoint="approve_license")
    @role_required(Role.MANAGER)
    def approve_license(license_id: int):
        return _decide(license_id, LicenseStatus.APPROVED)

    @app.route("/manager-approval/<int:license_id>/reject", methods=["POST"], endpoint="reject_license")
    @role_required(Role.MANAGER)
    def reject_license(license_id: int):
        return _decide(license_id, LicenseStatus.REJECTED)
