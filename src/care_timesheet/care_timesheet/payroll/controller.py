from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..common.web import current_identity, json_errors, login_required, permission_required, query_flag
from ..container import Container
from ..core.enums import Permission, RecordKind
from ..core.exceptions import ValidationError
from .export import XLSX_MIMETYPE, cycle_report_to_xlsx, work_entries_to_xlsx


def register(app: Flask, container: Container) -> None:
    def _hourly_rate():
        raw = request.args.get("hourlyRate")
        if not raw:
            return None
        try:
            return float(raw)
        except ValueError:
            raise ValidationError("Hourly rate must be a number")

    def _report():
        return container.cycle_report_service.build_cycle_report(
            user_id=request.args.get("userId") or None,
            hourly_rate=_hourly_rate(),
            include_deleted=query_flag(request.args.get("includeDeleted")),
        )

    @app.route("/api/cycle", methods=["GET"], endpoint="payment_cycle")
    @login_required
    @json_errors
    def payment_cycle():
        info = container.cycle_report_service.payment_cycle_info()
        display = container.cycle_report_service.display_cycle()
        return jsonify({**info.to_dict(), "displayCycle": display.to_dict()})

    @app.route("/api/cycle/summary", methods=["GET"], endpoint="my_cycle_summary")
    @login_required
    @json_errors
    def my_cycle_summary():
        report = container.cycle_report_service.build_cycle_report(user_id=current_identity().user_id)
        return jsonify(report.to_dict())

    @app.route("/api/cycle/work-entries.xlsx", methods=["GET"], endpoint="export_my_work_entries")
    @login_required
    @json_errors
    def export_my_work_entries():
        cycle = container.cycle_report_service.display_cycle().cycle
        entries = container.lifecycle_services[RecordKind.WORK_ENTRY].list_for_owner(
            current=current_identity(), start=cycle.start, end=cycle.end
        )
        buf = io.BytesIO(work_entries_to_xlsx(entries))
        return send_file(
            buf,
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=f"timesheets-{cycle.start.isoformat()}.xlsx",
        )

    @app.route("/api/admin/cycle/summary", methods=["GET"], endpoint="admin_cycle_summary")
    @permission_required(Permission.VIEW_REPORTS)
    @json_errors
    def admin_cycle_summary():
        return jsonify(_report().to_dict())

    @app.route("/api/admin/cycle/weekly-summaries", methods=["GET"], endpoint="admin_weekly_summaries")
    @permission_required(Permission.VIEW_REPORTS)
    @json_errors
    def admin_weekly_summaries():
        display = container.cycle_report_service.display_cycle()
        summaries = container.summary_tracker.summaries_for_cycle(display.cycle)
        return jsonify(
            {
                "cycle": display.cycle.to_dict(),
                "isGracePeriod": display.is_grace_period,
                "summaries": [s.to_dict() for s in summaries],
            }
        )

    @app.route("/api/admin/cycle/summary.xlsx", methods=["GET"], endpoint="admin_cycle_summary_xlsx")
    @permission_required(Permission.VIEW_REPORTS)
    @json_errors
    def admin_cycle_summary_xlsx():
        report = _report()
        buf = io.BytesIO(cycle_report_to_xlsx(report))
        return send_file(
            buf,
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=f"cycle-summary-{report.cycle.start.isoformat()}.xlsx",
        )
