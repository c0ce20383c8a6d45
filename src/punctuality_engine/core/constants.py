"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

GLOBAL_POLICY_SCOPE = "global"

# Fixed classification thresholds (not configurable).
EARLY_ENTRY_THRESHOLD_MINUTES = 30
EARLY_EXIT_THRESHOLD_MINUTES = 60
MODERATE_DELAY_MINUTES = 10

DEFAULT_TOLERANCE_MINUTES = 5
DEFAULT_LUNCH_DURATION_MINUTES = 60
DEFAULT_ISSUE_LIST_LIMIT = 200

SLACK_BOT_NAME = "Attendance System"
SLACK_ICON_EMOJI = ":clock1:"
