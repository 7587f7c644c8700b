from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import require_iso_date
from ..common.validators import require_choice
from ..common.web import current_identity, json_errors, login_required, permission_required, query_flag
from ..container import Container
from ..core.enums import Permission, RecordKind, RecordStatus
from ..core.exceptions import ForbiddenError, NotFoundError
from .service import RecordLifecycleService

# URL segment per record kind
KIND_SLUGS: dict[str, RecordKind] = {
    "work-entries": RecordKind.WORK_ENTRY,
    "leave-requests": RecordKind.LEAVE_REQUEST,
    "leave-hours": RecordKind.LEAVE_HOURS,
    "training": RecordKind.TRAINING,
}


def register(app: Flask, container: Container) -> None:
    def _service(slug: str) -> RecordLifecycleService:
        kind = KIND_SLUGS.get(slug)
        if kind is None:
            raise NotFoundError(f"Unknown record type: {slug}")
        return container.lifecycle_services[kind]

    def _list_filters() -> dict:
        args = request.args
        status = args.get("status")
        return {
            "start": require_iso_date(args["startDate"], "Start date") if args.get("startDate") else None,
            "end": require_iso_date(args["endDate"], "End date") if args.get("endDate") else None,
            "include_drafts": query_flag(args.get("includeDrafts")),
            "status": require_choice(status, RecordStatus, "Status") if status else None,
        }

    def _body() -> dict:
        return request.get_json(silent=True) or {}

    @app.route("/api/records/<slug>", methods=["GET"], endpoint="list_records")
    @login_required
    @json_errors
    def list_records(slug: str):
        records = _service(slug).list_for_owner(current=current_identity(), **_list_filters())
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/records/<slug>", methods=["POST"], endpoint="create_record")
    @login_required
    @json_errors
    def create_record(slug: str):
        record = _service(slug).create(current=current_identity(), payload=_body())
        return jsonify(record.to_dict()), 201

    @app.route("/api/records/<slug>/<int:record_id>", methods=["GET"], endpoint="get_record")
    @login_required
    @json_errors
    def get_record(slug: str, record_id: int):
        identity = current_identity()
        record = _service(slug).get(record_id=record_id)
        if record.user_id != identity.user_id and not identity.has_permission(Permission.APPROVE_RECORDS):
            raise ForbiddenError("Record belongs to another user")
        return jsonify(record.to_dict())

    @app.route("/api/records/<slug>/<int:record_id>", methods=["PUT"], endpoint="edit_record")
    @login_required
    @json_errors
    def edit_record(slug: str, record_id: int):
        record = _service(slug).edit(current=current_identity(), record_id=record_id, patch=_body())
        return jsonify(record.to_dict())

    @app.route("/api/records/<slug>/<int:record_id>/submit", methods=["POST"], endpoint="submit_record")
    @login_required
    @json_errors
    def submit_record(slug: str, record_id: int):
        record = _service(slug).submit_draft(current=current_identity(), record_id=record_id)
        return jsonify(record.to_dict())

    @app.route("/api/records/<slug>/<int:record_id>", methods=["DELETE"], endpoint="delete_record")
    @login_required
    @json_errors
    def delete_record(slug: str, record_id: int):
        result = _service(slug).delete(current=current_identity(), record_id=record_id)
        return jsonify({"message": result.message, "softDeleted": result.soft_deleted})

    # -------- admin --------
    @app.route("/api/admin/records/<slug>", methods=["GET"], endpoint="admin_list_records")
    @permission_required(Permission.APPROVE_RECORDS)
    @json_errors
    def admin_list_records(slug: str):
        records = _service(slug).list_for_admin(
            current=current_identity(),
            user_id=request.args.get("userId") or None,
            include_deleted=query_flag(request.args.get("includeDeleted")),
            **_list_filters(),
        )
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/admin/records/<slug>/<int:record_id>/approve", methods=["POST"], endpoint="approve_record")
    @permission_required(Permission.APPROVE_RECORDS)
    @json_errors
    def approve_record(slug: str, record_id: int):
        record = _service(slug).approve(current=current_identity(), record_id=record_id)
        return jsonify(record.to_dict())

    @app.route("/api/admin/records/<slug>/<int:record_id>/reject", methods=["POST"], endpoint="reject_record")
    @permission_required(Permission.APPROVE_RECORDS)
    @json_errors
    def reject_record(slug: str, record_id: int):
        record = _service(slug).reject(
            current=current_identity(),
            record_id=record_id,
            reason=_body().get("reason", ""),
        )
        return jsonify(record.to_dict())

    @app.route("/api/admin/records/<slug>/<int:record_id>/complete", methods=["POST"], endpoint="complete_record")
    @permission_required(Permission.APPROVE_RECORDS)
    @json_errors
    def complete_record(slug: str, record_id: int):
        record = _service(slug).complete(current=current_identity(), record_id=record_id)
        return jsonify(record.to_dict())

    @app.route("/api/admin/records/<slug>/<int:record_id>", methods=["DELETE"], endpoint="admin_delete_record")
    @permission_required(Permission.DELETE_RECORDS)
    @json_errors
    def admin_delete_record(slug: str, record_id: int):
        result = _service(slug).delete(
            current=current_identity(),
            record_id=record_id,
            reason=_body().get("reason"),
            as_admin=True,
        )
        return jsonify({"message": result.message, "softDeleted": result.soft_deleted})
