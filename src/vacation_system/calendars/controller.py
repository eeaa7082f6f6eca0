from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import parse_year
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from ..vacations.controller import current_user_id, error_response
from .holidays import holiday_events_for_year


def register(app: Flask, container: Container) -> None:
    @app.route("/calendar/events", methods=["GET"], endpoint="calendar_events")
    def calendar_events():
        try:
            current_user_id()
            year = parse_year(request.args.get("year"))
            if year is None:
                raise ValidationError("Missing year parameter")
            events = holiday_events_for_year(year)
        except DomainError as e:
            return error_response(e)

        return jsonify(
            [
                {
                    "start_date": h.day.isoformat(),
                    "end_date": h.day.isoformat(),
                    "title": h.name,
                    "movable": h.movable,
                }
                for h in events
            ]
        )
