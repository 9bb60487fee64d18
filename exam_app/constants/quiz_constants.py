"""Quiz-related constants shared across UI, server and core layers."""

OPTIONS_PER_QUESTION: int = 4
OPTION_LETTERS: tuple[str, ...] = ("A", "B", "C", "D")
DEFAULT_TIME_LIMIT_MINUTES: int = 15
TICK_INTERVAL_SECONDS: float = 1.0
TIME_WARNING_THRESHOLD_SECONDS: int = 60
SUBMITTED_SESSION_RETENTION_SECONDS: int = 300
