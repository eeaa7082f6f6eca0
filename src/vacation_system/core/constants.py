"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# (day, month) pairs of the fixed national holidays.
FIXED_HOLIDAYS = (
    (1, 1, "New Year's Day"),
    (25, 4, "Freedom Day"),
    (1, 5, "Labour Day"),
    (10, 6, "Portugal Day"),
    (15, 8, "Assumption Day"),
    (5, 10, "Republic Day"),
    (1, 11, "All Saints' Day"),
    (1, 12, "Restoration of Independence"),
    (8, 12, "Immaculate Conception"),
    (25, 12, "Christmas Day"),
)

# Offsets in days relative to Easter Sunday.
MOVABLE_HOLIDAYS = (
    (-47, "Carnival"),
    (-2, "Good Friday"),
    (0, "Easter Sunday"),
    (60, "Corpus Christi"),
)

MAX_NOTES_LENGTH = 1000
DEFAULT_ADMIN_LIST_LIMIT = 500

# MySQL error numbers that mean "try again".
ER_LOCK_WAIT_TIMEOUT = 1205
ER_LOCK_DEADLOCK = 1213
