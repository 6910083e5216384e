from __future__ import annotations

from flask import Flask

from ..common.http import fail, form_data, ok, system_error
from ..core.exceptions import DomainError, StoreError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    gate = container.session_gate

    @app.route("/dashboard/profile", methods=["GET"], endpoint="profile")
    @gate.login_required
    def profile():
        try:
            data = container.profile_service.get_profile(gate.current_identity())
            return ok("OK", scholar=data)
        except DomainError as e:
            return fail(e)
        except StoreError:
            return system_error("loading profile")

    @app.route("/dashboard/update-contact", methods=["POST"], endpoint="update_contact")
    @gate.login_required
    def update_contact():
        try:
            form = form_data()
            value = container.profile_service.update_contact(gate.current_identity(), form.get("contactNumber", ""))
            return ok("Contact number updated successfully!", contact_number=value)
        except DomainError as e:
            return fail(e)
        except StoreError:
            return system_error("updating contact number")
