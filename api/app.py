"""Flask REST API exposing the chicken keeper services and dashboard analytics."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from henhouse.analytics import RECENT_ACTIVITY_LIMIT, FlockAnalytics
from henhouse.charts import bar_chart, pie_chart
from henhouse.config import Settings
from henhouse.exceptions import PersistenceError, RecordNotFoundError, ValidationError
from henhouse.presentation import (
    BAR_COLORS,
    PRIORITY_COLORS,
    REMINDER_TYPE_STYLE,
    breakdown_label,
    category_color,
    format_money,
    month_label,
)
from henhouse.services import ExpenseService, IncomeService, ReminderService
from henhouse.storage import JSONStorage
from henhouse.timewindows import to_local
from henhouse.validators import parse_count, validate_datetime


def create_app(data_dir: Optional[Path] = None, settings: Optional[Settings] = None) -> Flask:
    app = Flask(__name__)

    settings = settings or Settings.from_env()
    if data_dir is not None:
        settings = replace(settings, data_dir=Path(data_dir))

    if settings.is_dev:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    elif settings.allowed_origins:
        origins = list(settings.allowed_origins)
        CORS(app, resources={r"/*": {"origins": origins}}, supports_credentials=True)
    else:
        CORS(app)

    storage = JSONStorage(settings.data_dir)
    reminder_service = ReminderService(storage)
    income_service = IncomeService(storage)
    expense_service = ExpenseService(storage)
    analytics = FlockAnalytics(
        reminder_service, income_service, expense_service, week_start=settings.week_start
    )

    for service in (reminder_service, income_service, expense_service):
        if service.load_result.is_corrupt:
            app.logger.warning("Started with empty %s: %s", service.label, service.load_result.reason)

    def _success(payload: Any, status: int = 200):
        if status == 204:
            return ("", status)
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error")

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(exc: RecordNotFoundError):
        return _handle_error(exc, 404, "Record not found")

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(exc: PersistenceError):
        return _handle_error(exc, 500, "Persistence error")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    def _now() -> Optional[datetime]:
        raw = request.args.get("now")
        if raw in (None, ""):
            return None
        return to_local(validate_datetime(raw, "now"))

    def _reminder_dict(reminder) -> Dict[str, Any]:
        style = REMINDER_TYPE_STYLE[reminder.type]
        return {
            **reminder.to_dict(),
            "icon": style["icon"],
            "color": style["color"],
            "priority_color": PRIORITY_COLORS[reminder.priority],
        }

    def _income_dict(income) -> Dict[str, Any]:
        return {**income.to_dict(), "total": format_money(income.total)}

    # Reminders ------------------------------------------------------------
    @app.get("/reminders")
    def list_reminders():
        reminders = reminder_service.list()
        return _success({"items": [_reminder_dict(reminder) for reminder in reminders]})

    @app.post("/reminders")
    def create_reminder():
        reminder = reminder_service.add(_json_body())
        return _success(_reminder_dict(reminder), 201)

    @app.get("/reminders/summary")
    def reminder_summary():
        summary = analytics.reminder_summary(_now())
        return _success({
            "total": summary.total,
            "completed": summary.completed,
            "pending": summary.pending,
            "due_today": summary.due_today,
            "completed_today": summary.completed_today,
        })

    @app.get("/reminders/recent")
    def recent_reminders():
        raw_limit = request.args.get("limit")
        limit = RECENT_ACTIVITY_LIMIT if raw_limit in (None, "") else parse_count(raw_limit, "limit")
        reminders = analytics.recent_reminders(limit)
        return _success({"items": [_reminder_dict(reminder) for reminder in reminders]})

    @app.get("/reminders/<reminder_id>")
    def get_reminder(reminder_id: str):
        return _success(_reminder_dict(reminder_service.get(reminder_id)))

    @app.put("/reminders/<reminder_id>/completion")
    def set_reminder_completion(reminder_id: str):
        payload = _json_body()
        reminder = reminder_service.set_completed(reminder_id, payload.get("is_completed"))
        return _success(_reminder_dict(reminder))

    @app.post("/reminders/<reminder_id>/toggle")
    def toggle_reminder(reminder_id: str):
        return _success(_reminder_dict(reminder_service.toggle(reminder_id)))

    @app.delete("/reminders/<reminder_id>")
    def delete_reminder(reminder_id: str):
        reminder_service.delete(reminder_id)
        return _success({}, 204)

    # Income ---------------------------------------------------------------
    @app.get("/incomes")
    def list_incomes():
        incomes = income_service.list()
        return _success({"items": [_income_dict(income) for income in incomes]})

    @app.post("/incomes")
    def create_income():
        income = income_service.add(_json_body())
        return _success(_income_dict(income), 201)

    @app.get("/incomes/<income_id>")
    def get_income(income_id: str):
        return _success(_income_dict(income_service.get(income_id)))

    @app.delete("/incomes/<income_id>")
    def delete_income(income_id: str):
        income_service.delete(income_id)
        return _success({}, 204)

    # Expenses -------------------------------------------------------------
    @app.get("/expenses")
    def list_expenses():
        expenses = expense_service.list()
        return _success({"items": [expense.to_dict() for expense in expenses]})

    @app.post("/expenses")
    def create_expense():
        expense = expense_service.add(_json_body())
        return _success(expense.to_dict(), 201)

    @app.get("/expenses/<expense_id>")
    def get_expense(expense_id: str):
        return _success(expense_service.get(expense_id).to_dict())

    @app.delete("/expenses/<expense_id>")
    def delete_expense(expense_id: str):
        expense_service.delete(expense_id)
        return _success({}, 204)

    # Analytics ------------------------------------------------------------
    @app.get("/stats")
    def stats():
        snapshot = analytics.snapshot(_now())
        return _success({
            name: value if isinstance(value, int) else format_money(value)
            for name, value in snapshot.items()
        })

    @app.get("/charts/performance")
    def performance_chart():
        series = analytics.monthly_performance(_now())
        chart = bar_chart(series)
        return _success({
            "max_value": chart.max_value,
            "months": [
                {
                    "key": bucket.key,
                    "label": month_label(bucket.month),
                    "income": format_money(bucket.income),
                    "expenses": format_money(bucket.expenses),
                    "profit": format_money(bucket.profit),
                    "bars": [
                        {
                            "kind": segment.kind,
                            "fraction": segment.fraction,
                            "height": segment.height,
                            "negative": segment.negative,
                            "color": BAR_COLORS[segment.kind],
                        }
                        for segment in group.segments
                    ],
                }
                for bucket, group in zip(series, chart.groups)
            ],
        })

    @app.get("/charts/expenses")
    def expense_chart():
        breakdown = analytics.expense_breakdown()
        slices = pie_chart(breakdown)
        return _success({
            "categories": [
                {
                    "category": item.category.value,
                    "total": format_money(item.total),
                    "label": breakdown_label(item.category, item.total),
                    "color": category_color(item.category),
                }
                for item in breakdown
            ],
            "slices": [
                {
                    "category": piece.category.value if piece.category else None,
                    "start_angle": piece.start_angle,
                    "end_angle": piece.end_angle,
                    "span": piece.span,
                    "color": category_color(piece.category),
                }
                for piece in slices
            ],
        })

    return app
