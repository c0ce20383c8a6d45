from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from ..actions.engine import ActionEngine
from ..actions.model import PunctualityAction
from ..common.validators import require_min_length
from ..core.enums import ActionType, CheckInType
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..kiosks.model import Kiosk
from ..kiosks.repository import KioskRepository
from ..policy.model import Policy
from ..policy.resolver import ConfigResolver
from ..schedules.service import ScheduleProvider
from .factory import TimingClassifier
from .model import CheckInEvent, ClassificationResult, GeoPoint
from .repository import CheckInRepository
from .sessions import find_opener

logger = logging.getLogger(__name__)

CLOSING_TYPES = (CheckInType.EXIT, CheckInType.LUNCH_RETURN)


@dataclass(frozen=True)
class CheckInOutcome:
    event: CheckInEvent
    classification: ClassificationResult
    actions: tuple[PunctualityAction, ...]


class CheckInService:
    """Record a check-in: classify, persist, then run the action cascade.

    Store failures while resolving inputs or persisting the event propagate.
    Failures inside the cascade are recorded on the returned actions.
    """

    def __init__(
        self,
        checkins: CheckInRepository,
        employees: EmployeeRepository,
        kiosks: KioskRepository,
        schedules: ScheduleProvider,
        resolver: ConfigResolver,
        engine: ActionEngine,
        *,
        classifier: Optional[TimingClassifier] = None,
    ):
        self._checkins = checkins
        self._employees = employees
        self._kiosks = kiosks
        self._schedules = schedules
        self._resolver = resolver
        self._engine = engine
        self._classifier = classifier or TimingClassifier()

    def record(self, event: CheckInEvent) -> CheckInOutcome:
        """Classify against the employee's own product line.

        Whatever product line the event carries is replaced, and location
        validity is decided here from the kiosk coordinates.
        """

        employee = self._employees.get_by_id(event.user_id)
        if not employee:
            raise NotFoundError(f"Employee {event.user_id} does not exist")
        if not employee.is_active:
            raise ValidationError("Employee is not active")
        if not employee.product_line:
            raise ValidationError("Employee has no product line assigned")

        kiosk = self._kiosks.get_by_id(event.kiosk_id)
        if not kiosk:
            raise NotFoundError(f"Kiosk {event.kiosk_id} does not exist")
        if not kiosk.is_active:
            raise ValidationError("Kiosk is not active")

        product_line = employee.product_line
        event = replace(event, product_line=product_line, kiosk_name=kiosk.name)

        schedule = self._schedules.resolve(product_line)
        policy = self._resolver.resolve(product_line)
        location_valid = self._location_valid(kiosk, event.location, policy)

        opener = None
        if event.checkin_type in CLOSING_TYPES:
            prior = self._checkins.list_for_user_and_date(event.user_id, event.work_date)
            opener = find_opener(prior, event)

        classification = self._classifier.classify(event, schedule, opener, location_valid=location_valid)
        classified = event.with_classification(classification)
        checkin_id = self._checkins.create(classified)
        classified = replace(classified, checkin_id=checkin_id)
        logger.info(
            "Check-in %s: user=%s type=%s status=%s",
            checkin_id,
            event.user_id,
            event.checkin_type.value,
            classification.status.value,
        )

        actions = self._engine.apply(classified, classification, employee, policy)
        flagged = any(a.action_type == ActionType.REQUIRE_COMMENT and a.success for a in actions)
        classified = replace(
            classified,
            requires_comment=flagged,
            actions_taken=tuple(a.to_dict() for a in actions),
        )
        return CheckInOutcome(event=classified, classification=classification, actions=tuple(actions))

    @staticmethod
    def _location_valid(kiosk: Kiosk, location: Optional[GeoPoint], policy: Policy) -> bool:
        if location is None:
            return False
        distance = kiosk.distance_to(location.latitude, location.longitude)
        allowed = kiosk.allowed_radius(policy.default_radius_meters)
        if distance > allowed:
            logger.info("Check-in at %s is %.0f m away (allowed %s m)", kiosk.kiosk_id, distance, allowed)
            return False
        return True

    def add_comment(self, checkin_id: int, comment: str, *, user_id: Optional[int] = None) -> CheckInEvent:
        event = self._checkins.get_by_id(int(checkin_id))
        if not event:
            raise NotFoundError(f"Check-in {checkin_id} does not exist")
        if user_id is not None and event.user_id != int(user_id):
            raise ValidationError("You can only comment on your own check-ins")

        policy = self._resolver.resolve(event.product_line)
        comment = require_min_length(comment, "Comment", policy.comment_rules.min_comment_length)
        self._checkins.set_notes(event.checkin_id, notes=comment, requires_comment=False)
        return replace(event, notes=comment, requires_comment=False)
