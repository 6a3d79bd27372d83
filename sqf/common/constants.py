"""Application constants."""

SUPPORTED_YEARS = tuple(range(2006, 2013))
STAGES = (
    "recode",
    "validate",
)
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20

FORCE_FIELD_PREFIX = "pf_"
FORCE_MARKER = "Y"
MISSING_TOKENS = ("", "NA")

YMD_SENTINEL = "1900-12-31"
MDY_SENTINEL = "12311900"
AGE_SENTINELS = (999, 377)
AGE_RANGE = (0, 100)

STANDARDIZED_COLUMNS = (
    "id",
    "date",
    "time",
    "year",
    "race",
    "female",
    "age",
    "police_force",
    "precinct",
    "xcoord",
    "ycoord",
)
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "year",
    "event",
    "status",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
