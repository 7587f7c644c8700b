from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .core.constants import DEFAULT_APPROVED_VISIBILITY_HOURS
from .core.enums import RecordKind
from .cycles.model import CycleConfig
from .database.connection import DBConfig, DatabaseConnection
from .payroll.service import CycleReportService
from .records.factory import RecordFactory
from .records.kinds import POLICIES
from .records.mysql_record_repository import MySQLRecordRepository
from .records.service import RecordLifecycleService
from .summaries.mysql_summary_repository import MySQLWeeklySummaryRepository
from .summaries.tracker import WeeklySummaryTracker


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    cycle_config: CycleConfig

    record_repos: Mapping[RecordKind, MySQLRecordRepository]
    summaries_repo: MySQLWeeklySummaryRepository
    summary_tracker: WeeklySummaryTracker

    lifecycle_services: Mapping[RecordKind, RecordLifecycleService]
    cycle_report_service: CycleReportService


def build_container(
    *,
    db_config: dict,
    cycle_config: CycleConfig,
    visibility_hours: float = DEFAULT_APPROVED_VISIBILITY_HOURS,
    hourly_rate: float = 0.0,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    record_repos = {kind: MySQLRecordRepository(conn, policy) for kind, policy in POLICIES.items()}
    summaries_repo = MySQLWeeklySummaryRepository(conn)
    summary_tracker = WeeklySummaryTracker(summaries_repo, record_repos[RecordKind.WORK_ENTRY], cycle_config)

    factory = RecordFactory()
    lifecycle_services = {
        kind: RecordLifecycleService(
            policy,
            record_repos[kind],
            factory=factory,
            summary_tracker=summary_tracker,
            visibility_hours=visibility_hours,
        )
        for kind, policy in POLICIES.items()
    }
    cycle_report_service = CycleReportService(record_repos, cycle_config, hourly_rate=hourly_rate)

    return Container(
        conn=conn,
        cycle_config=cycle_config,
        record_repos=record_repos,
        summaries_repo=summaries_repo,
        summary_tracker=summary_tracker,
        lifecycle_services=lifecycle_services,
        cycle_report_service=cycle_report_service,
    )
