"""Example: classify check-ins with the service layer, no Flask and no database.

Controllers are thin; the timing rules live in the classifier.
"""

from datetime import datetime

from punctuality_engine.checkins.factory import TimingClassifier
from punctuality_engine.checkins.model import CheckInEvent
from punctuality_engine.checkins.sessions import find_opener
from punctuality_engine.core.enums import CheckInType
from punctuality_engine.policy.resolver import merge_policy
from punctuality_engine.schedules.defaults import default_schedule


def main():
    schedule = default_schedule("Disensa")
    policy = merge_policy({"severe_delay_threshold": 30}, {"lunch_rules": {"max_duration_minutes": 45}})
    classifier = TimingClassifier()

    day = datetime(2024, 3, 4)
    entry = CheckInEvent(1, "K-01", "Disensa", CheckInType.ENTRY, day.replace(hour=8, minute=12))
    lunch_out = CheckInEvent(1, "K-01", "Disensa", CheckInType.LUNCH_OUT, day.replace(hour=14))
    lunch_return = CheckInEvent(1, "K-01", "Disensa", CheckInType.LUNCH_RETURN, day.replace(hour=15, minute=5))

    print("entry:", classifier.classify(entry, schedule))
    opener = find_opener([entry, lunch_out], lunch_return)
    print("lunch return:", classifier.classify(lunch_return, schedule, opener))
    print("policy:", policy.severe_delay_threshold, policy.lunch_rules.max_duration_minutes)


if __name__ == "__main__":
    main()
