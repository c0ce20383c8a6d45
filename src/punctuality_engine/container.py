from __future__ import annotations

from dataclasses import dataclass

from .actions.engine import ActionEngine
from .checkins.factory import TimingClassifier, TimingStrategyFactory
from .checkins.mysql_checkin_repository import MySQLCheckInRepository
from .checkins.service import CheckInService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .issues.detector import IssueDetector
from .issues.mysql_issue_repository import MySQLIssueRepository
from .issues.service import IssueService
from .kiosks.mysql_kiosk_repository import MySQLKioskRepository
from .notifications.dispatcher import NotificationDispatcher
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.slack import SlackWebhookClient
from .policy.mysql_policy_repository import MySQLPolicyRepository
from .policy.resolver import ConfigResolver
from .policy.service import PolicyService
from .schedules.mysql_holiday_repository import MySQLHolidayRepository
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.service import HolidayCalendar, ScheduleProvider
from .stats.service import AttendanceStatsService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    kiosks_repo: MySQLKioskRepository
    checkins_repo: MySQLCheckInRepository
    issues_repo: MySQLIssueRepository
    policies_repo: MySQLPolicyRepository
    schedules_repo: MySQLScheduleRepository
    holidays_repo: MySQLHolidayRepository
    notifications_repo: MySQLNotificationRepository

    holiday_calendar: HolidayCalendar
    schedule_provider: ScheduleProvider
    config_resolver: ConfigResolver
    policy_service: PolicyService
    action_engine: ActionEngine
    checkin_service: CheckInService
    issue_detector: IssueDetector
    issue_service: IssueService
    stats_service: AttendanceStatsService


def build_container(*, db_config: dict, slack_timeout: float = 10, slack_username: str | None = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    kiosks_repo = MySQLKioskRepository(conn)
    checkins_repo = MySQLCheckInRepository(conn)
    issues_repo = MySQLIssueRepository(conn)
    policies_repo = MySQLPolicyRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)
    holidays_repo = MySQLHolidayRepository(conn)
    notifications_repo = MySQLNotificationRepository(conn)

    holiday_calendar = HolidayCalendar(holidays_repo)
    schedule_provider = ScheduleProvider(schedules_repo, holiday_calendar)
    config_resolver = ConfigResolver(policies_repo)
    policy_service = PolicyService(policies_repo)

    sink = NotificationDispatcher(
        notifications_repo,
        SlackWebhookClient(timeout=slack_timeout, username=slack_username),
    )
    action_engine = ActionEngine(employees_repo, checkins_repo, sink)
    checkin_service = CheckInService(
        checkins_repo,
        employees_repo,
        kiosks_repo,
        schedule_provider,
        config_resolver,
        action_engine,
        classifier=TimingClassifier(TimingStrategyFactory()),
    )
    issue_detector = IssueDetector(
        employees_repo,
        checkins_repo,
        issues_repo,
        schedule_provider,
        holiday_calendar,
        config_resolver,
        engine=action_engine,
    )
    issue_service = IssueService(issues_repo)
    stats_service = AttendanceStatsService(checkins_repo, issues_repo, employees_repo)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        kiosks_repo=kiosks_repo,
        checkins_repo=checkins_repo,
        issues_repo=issues_repo,
        policies_repo=policies_repo,
        schedules_repo=schedules_repo,
        holidays_repo=holidays_repo,
        notifications_repo=notifications_repo,
        holiday_calendar=holiday_calendar,
        schedule_provider=schedule_provider,
        config_resolver=config_resolver,
        policy_service=policy_service,
        action_engine=action_engine,
        checkin_service=checkin_service,
        issue_detector=issue_detector,
        issue_service=issue_service,
        stats_service=stats_service,
    )
