from __future__ import annotations

from datetime import timedelta

from flask import Flask, url_for

from ..common.http import fail, form_data, ok, system_error
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.exceptions import DomainError, StoreError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    gate = container.session_gate
    app.permanent_session_lifetime = timedelta(days=int(app.config.get("SESSION_DAYS", DEFAULT_SESSION_DAYS)))

    def _reset_link(token: str) -> str:
        return url_for("reset_password", token=token, _external=True, _scheme="https")

    @app.route("/initialize", methods=["POST"], endpoint="initialize")
    def initialize():
        try:
            form = form_data()
            identity = container.credential_service.initialize(
                form.get("initializationCode", ""),
                form.get("username", ""),
                form.get("password", ""),
                form.get("confirmPassword", ""),
            )
            gate.establish(identity)
            return ok("Account initialized.", redirect=url_for("profile"))
        except DomainError as e:
            return fail(e)
        except StoreError:
            return system_error("initializing account")

    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        try:
            form = form_data()
            identity = container.credential_service.login(form.get("username", ""), form.get("password", ""))
            gate.establish(identity, remember=bool(form.get("remember_me")))
            return ok("Login successful.", redirect=url_for("profile"))
        except DomainError as e:
            return fail(e)
        except StoreError:
            return system_error("logging in")

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        gate.destroy()
        return ok("Logged out.")

    @app.route("/dashboard/change-password", methods=["POST"], endpoint="change_password")
    @gate.login_required
    def change_password():
        try:
            form = form_data()
            container.credential_service.change_password(
                gate.current_identity(),
                form.get("currentPassword", ""),
                form.get("newPassword", ""),
                form.get("confirmNewPassword", ""),
            )
            return ok("Password changed successfully!")
        except DomainError as e:
            return fail(e)
        except StoreError:
            return system_error("changing password")

    @app.route("/forgot-password", methods=["POST"], endpoint="forgot_password")
    def forgot_password():
        try:
            form = form_data()
            result = container.credential_service.request_reset(form.get("email", ""), reset_link=_reset_link)
        except DomainError as e:
            return fail(e)
        except StoreError:
            return system_error("requesting password reset")
        return ok(result.message)

    @app.route("/reset-password/<token>", methods=["GET"], endpoint="reset_password")
    def reset_password_form(token: str):
        try:
            container.credential_service.resolve_reset(token)
            return ok("Token is valid.", token=token)
        except DomainError as e:
            return fail(e)
        except StoreError:
            return system_error("checking reset token")

    @app.route("/reset-password/<token>", methods=["POST"], endpoint="complete_reset")
    def complete_reset(token: str):
        try:
            form = form_data()
            container.credential_service.complete_reset(
                token,
                form.get("password", ""),
                form.get("confirmPassword", ""),
            )
            return ok("Your password has been successfully reset. Please log in.", redirect=url_for("login"))
        except DomainError as e:
            return fail(e)
        except StoreError:
            return system_error("resetting password")
