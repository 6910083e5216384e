from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_optional_date
from ..common.http import fail, ok, system_error
from ..core.exceptions import DomainError, StoreError
from ..container import Container
from .model import ImageUpload


def register(app: Flask, container: Container) -> None:
    gate = container.session_gate

    def _image_from_request():
        f = request.files.get("image")
        if not f or not f.filename:
            return None
        return ImageUpload(data=f.read(), media_type=f.mimetype or "")

    @app.route("/dashboard/activities", methods=["GET"], endpoint="activities")
    @gate.login_required
    def activities():
        try:
            programs = container.activity_service.list_ui(gate.current_identity())
            return ok("OK", programs=programs)
        except StoreError:
            return system_error("loading activities")

    @app.route("/dashboard/activities", methods=["POST"], endpoint="submit_activity")
    @gate.login_required
    def submit_activity():
        form = request.form
        try:
            program_id = container.activity_service.submit(
                gate.current_identity(),
                form.get("title", ""),
                form.get("description", ""),
                parse_optional_date(form.get("startDate"), "Start Date"),
                parse_optional_date(form.get("endDate"), "End Date"),
                _image_from_request(),
            )
            return ok("Activity program saved.", 201, program_id=program_id)
        except DomainError as e:
            return fail(e)
        except StoreError:
            return system_error("saving activity program")

    @app.errorhandler(413)
    def too_large(_e):
        return {"success": False, "message": "Image must be at most 5 MB"}, 413
