"""Display string tables keyed by language tag, falling back to English."""

from __future__ import annotations

STRINGS: dict[str, dict[str, str]] = {
    "en": {
        "WEEK_SUNDAY_SHORT": "Sun",
        "WEEK_MONDAY_SHORT": "Mon",
        "WEEK_TUESDAY_SHORT": "Tue",
        "WEEK_WEDNESDAY_SHORT": "Wed",
        "WEEK_THURSDAY_SHORT": "Thu",
        "WEEK_FRIDAY_SHORT": "Fri",
        "WEEK_SATURDAY_SHORT": "Sat",
        "CURRENT_MONTH_BOOKINGS": "Current Month Bookings",
        "NO_BOOKINGS_AVAILABLE": "No bookings for this month",
        "DAY_LABEL": "day",
        "DAYS_LABEL": "days",
        "UNKNOWN_ROOM": "Unknown Room",
        "CONFLICT_MESSAGE": "This room is already booked for the selected dates",
    },
    "es": {
        "WEEK_SUNDAY_SHORT": "Dom",
        "WEEK_MONDAY_SHORT": "Lun",
        "WEEK_TUESDAY_SHORT": "Mar",
        "WEEK_WEDNESDAY_SHORT": "Mié",
        "WEEK_THURSDAY_SHORT": "Jue",
        "WEEK_FRIDAY_SHORT": "Vie",
        "WEEK_SATURDAY_SHORT": "Sáb",
        "CURRENT_MONTH_BOOKINGS": "Reservas del mes",
        "NO_BOOKINGS_AVAILABLE": "No hay reservas este mes",
        "DAY_LABEL": "día",
        "DAYS_LABEL": "días",
        "UNKNOWN_ROOM": "Sala desconocida",
        "CONFLICT_MESSAGE": "Esta sala ya está reservada para las fechas seleccionadas",
    },
}

_WEEKDAY_KEYS = (
    "WEEK_SUNDAY_SHORT",
    "WEEK_MONDAY_SHORT",
    "WEEK_TUESDAY_SHORT",
    "WEEK_WEDNESDAY_SHORT",
    "WEEK_THURSDAY_SHORT",
    "WEEK_FRIDAY_SHORT",
    "WEEK_SATURDAY_SHORT",
)


def get_strings(language: str) -> dict[str, str]:
    return dict(STRINGS.get(language, STRINGS["en"]))


def weekday_headers(language: str) -> list[str]:
    """Sunday-first column headers for the month grid."""
    strings = get_strings(language)
    return [strings[key] for key in _WEEKDAY_KEYS]
