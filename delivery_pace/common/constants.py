"""Application constants."""

STAGES = (
    "normalise",
    "benchmark",
    "temporal",
)
VIEWS = ("all", "accurate")
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20

CANONICAL_COLUMNS = ("enumerator", "delivered_on", "distance", "property_type")
REQUIRED_COLUMNS = ("enumerator", "delivered_on", "distance")
DISTANCE_UNITS = {"m": 1.0, "km": 1000.0}
DAILY_PACE_ROUNDING = ("none", "ceiling")

DEFAULT_THRESHOLD_METERS = 80.0
DEFAULT_IQR_MULTIPLIER = 1.5
DEFAULT_PERCENTILES = (80, 90)
MIN_SERIES_POINTS = 2
MAX_UNPARSEABLE_SAMPLES = 20

TIME_OF_DAY_BRACKETS = (
    (6, 9, "06:00-09:00"),
    (9, 12, "09:00-12:00"),
    (12, 15, "12:00-15:00"),
    (15, 18, "15:00-18:00"),
)
OTHER_BRACKET = "Other"
DAYS_OF_WEEK = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "site",
    "view",
    "event",
    "status",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
