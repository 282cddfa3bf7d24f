"""
Query constants.

Column names of the backing table and tuning thresholds for the read path.
"""

# Reserved label holding the metric name
NAME_LABEL = "__name__"

# Backing table columns
METRIC_NAME_COLUMN = "metric_name"
LABELS_COLUMN = "labels"
TIME_COLUMN = "updated_at"
VALUE_COLUMN = "value"

# Positional placeholder understood by clickhouse-connect client-side binding
PLACEHOLDER = "%s"

# Only consider sampling data when the step hint is larger than this
MIN_STEP_HINT_MS = 2000

# Anchors wrapped around regex matchers, bound as separate parameters
REGEX_START = "^"
REGEX_END = "$"

# How often a waiting read checks for cancellation, in seconds
CANCEL_POLL_INTERVAL = 0.05

# Rows buffered between the store connection and the assembler
ROW_BUFFER_SIZE = 10000
