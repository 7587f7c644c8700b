from __future__ import annotations

from enum import Enum


class RecordStatus(str, Enum):
    """Lifecycle state shared by every hour-bearing record."""

    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class RecordKind(str, Enum):
    WORK_ENTRY = "work_entry"
    LEAVE_REQUEST = "leave_request"
    LEAVE_HOURS = "leave_hours"
    TRAINING = "training"


class LeaveType(str, Enum):
    """Day-based leave request types."""

    ANNUAL = "annual"
    SICK = "sick"
    MATERNITY = "maternity"
    PATERNITY = "paternity"


class LeaveHoursType(str, Enum):
    ANNUAL = "annual"
    SICK = "sick"
    PERSONAL = "personal"
    MATERNITY = "maternity"
    PATERNITY = "paternity"
    BEREAVEMENT = "bereavement"
    EMERGENCY = "emergency"
    UNPAID = "unpaid"
    OTHER = "other"


class TrainingType(str, Enum):
    MANDATORY = "mandatory"
    PROFESSIONAL = "professional"
    SKILLS = "skills"
    SAFETY = "safety"


class Permission(str, Enum):
    """Permission flags granted by the authentication provider."""

    APPROVE_RECORDS = "approve:timesheet"
    DELETE_RECORDS = "delete:timesheet"
    VIEW_REPORTS = "view:reports"
