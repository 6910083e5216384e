from __future__ import annotations

from flask import Flask

from ..common.http import fail, ok, system_error
from ..core.exceptions import DomainError, StoreError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    gate = container.session_gate

    @app.route("/dashboard/payroll", methods=["GET"], endpoint="payroll")
    @gate.login_required
    def payroll():
        try:
            data = container.payroll_service.get_overview(gate.current_identity())
            return ok("OK", payroll=data)
        except DomainError as e:
            return fail(e)
        except StoreError:
            return system_error("loading payroll")

    @app.route("/dashboard/request-payroll", methods=["POST"], endpoint="request_payroll")
    @gate.login_required
    def request_payroll():
        try:
            container.payroll_service.request_payroll(gate.current_identity())
            return ok("Payroll request submitted successfully.")
        except DomainError as e:
            return fail(e)
        except StoreError:
            return system_error("requesting payroll")
