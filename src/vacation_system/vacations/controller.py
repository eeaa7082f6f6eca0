from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date
from ..common.validators import parse_year
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DataIntegrityError,
    DomainError,
    InsufficientBalanceError,
    NotFoundError,
    SchedulingConflictError,
    TransientError,
    ValidationError,
)
from ..container import Container

logger = logging.getLogger(__name__)

STATUS_CODES = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (SchedulingConflictError, 409),
    (InsufficientBalanceError, 422),
    (TransientError, 503),
    (DataIntegrityError, 500),
    (ValidationError, 400),
)


def error_response(exc: DomainError):
    code = next((c for kind, c in STATUS_CODES if isinstance(exc, kind)), 400)
    body = {"error": type(exc).__name__, "message": str(exc)}
    if isinstance(exc, InsufficientBalanceError):
        body.update(available=exc.available, requested=exc.requested, already_approved=exc.already_approved)
    if isinstance(exc, SchedulingConflictError):
        body.update(conflicting_request_id=exc.request_id, conflicting_status=exc.status.value)
    response = jsonify(body)
    response.status_code = code
    if code == 503:
        response.headers["Retry-After"] = "1"
    if code >= 500:
        logger.error("Request failed: %s", exc)
    return response


def current_user_id() -> int:
    if "user_id" not in session:
        raise AuthenticationError("Please log in to continue")
    return int(session["user_id"])


def current_is_admin() -> bool:
    return bool(session.get("is_admin", False))


def register(app: Flask, container: Container) -> None:
    service = container.vacation_service

    def json_endpoint(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                return error_response(e)

        return wrapper

    def _payload() -> dict:
        data = request.get_json(silent=True)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    @app.route("/vacations", methods=["POST"], endpoint="submit_vacation_request")
    @json_endpoint
    def submit_vacation_request():
        user_id = current_user_id()
        data = _payload()
        request_id = service.create_request(
            user_id=user_id,
            start_date=parse_iso_date(data.get("start_date") or ""),
            end_date=parse_iso_date(data.get("end_date") or ""),
            notes=data.get("notes"),
        )
        return jsonify({"id": request_id}), 201

    @app.route("/vacations/mine", methods=["GET"], endpoint="my_vacation_requests")
    @json_endpoint
    def my_vacation_requests():
        user_id = current_user_id()
        year = parse_year(request.args.get("year"))
        requests = service.get_requests_for_user(user_id=user_id, year=year)
        return jsonify([r.to_dict() for r in requests])

    @app.route("/vacations/balance", methods=["GET"], endpoint="my_vacation_balance")
    @json_endpoint
    def my_vacation_balance():
        user_id = current_user_id()
        year = parse_year(request.args.get("year"))
        return jsonify(service.get_remaining_balance(user_id=user_id, year=year).to_dict())

    @app.route("/vacations/<int:request_id>", methods=["GET"], endpoint="vacation_request_detail")
    @json_endpoint
    def vacation_request_detail(request_id: int):
        user_id = current_user_id()
        req = service.get_request(request_id=request_id, user_id=user_id, is_admin=current_is_admin())
        return jsonify(req.to_dict())

    @app.route("/admin/vacations/pending", methods=["GET"], endpoint="admin_pending_vacations")
    @json_endpoint
    def admin_pending_vacations():
        current_user_id()
        raw_ids = request.args.getlist("user_id")
        try:
            user_ids = [int(v) for v in raw_ids] if raw_ids else None
        except ValueError:
            raise ValidationError("user_id must be an integer") from None
        pending = service.list_pending_requests(is_admin=current_is_admin(), user_ids=user_ids)
        return jsonify([r.to_dict() for r in pending])

    @app.route("/admin/vacations/<int:request_id>/action", methods=["POST"], endpoint="action_vacation_request")
    @json_endpoint
    def action_vacation_request(request_id: int):
        admin_id = current_user_id()
        data = _payload()
        result = service.action_request(
            request_id=request_id,
            admin_id=admin_id,
            target_status=data.get("status") or "",
            admin_notes=data.get("admin_notes"),
            is_admin=current_is_admin(),
        )
        return jsonify(
            {
                "changed": result.changed,
                "outcome": result.outcome.value,
                "request": result.request.to_dict(),
                "days_deducted": result.days_deducted,
            }
        )
