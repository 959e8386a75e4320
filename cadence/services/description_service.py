# File: cadence/services/description_service.py

"""
Repetition Description Service

Renders a repetition rule as a short localized sentence, e.g. "Every week on
Friday" or "Every month on the first Monday". The locale is always passed in
by the caller; nothing here reads user preferences.
"""

import logging
from typing import Any, Dict, List, Optional

from cadence.core.config import settings
from cadence.core.exceptions import UnsupportedRepetitionTypeException
from cadence.core.repetition import (
    DailyMoment,
    MonthlyMoment,
    NthWeekdayMoment,
    RepetitionRule,
    WeeklyMoment,
    YearlyMoment,
)

logger = logging.getLogger(__name__)


def _english_day(day: int) -> str:
    if 10 <= day % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def _french_day(day: int) -> str:
    return "1er" if day == 1 else f"{day}e"


# Per-locale phrase catalog. Weekdays are indexed by ISO number - 1,
# months by month number - 1, ordinals by ordinal - 1.
CATALOG: Dict[str, Dict[str, Any]] = {
    "en": {
        "daily": "Every day",
        "weekly": "Every week on {weekday}",
        "monthly": "Every month on the {day} day",
        "ndom": "Every month on the {ordinal} {weekday}",
        "yearly": "Every year on {month} {day}",
        "day_format": _english_day,
        "date_day_format": str,
        "weekdays": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"],
        "ordinals": ["first", "second", "third", "fourth", "fifth"],
        "months": [
            "January", "February", "March", "April", "May", "June",
            "July", "August", "September", "October", "November", "December",
        ],
    },
    "de": {
        "daily": "Jeden Tag",
        "weekly": "Jede Woche am {weekday}",
        "monthly": "Jeden Monat am {day} Tag",
        "ndom": "Jeden Monat am {ordinal} {weekday}",
        "yearly": "Jedes Jahr am {day} {month}",
        "day_format": lambda day: f"{day}.",
        "date_day_format": lambda day: f"{day}.",
        "weekdays": ["Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag", "Sonntag"],
        "ordinals": ["ersten", "zweiten", "dritten", "vierten", "fünften"],
        "months": [
            "Januar", "Februar", "März", "April", "Mai", "Juni",
            "Juli", "August", "September", "Oktober", "November", "Dezember",
        ],
    },
    "fr": {
        "daily": "Chaque jour",
        "weekly": "Chaque semaine le {weekday}",
        "monthly": "Chaque mois le {day} jour",
        "ndom": "Chaque mois le {ordinal} {weekday}",
        "yearly": "Chaque année le {day} {month}",
        "day_format": _french_day,
        "date_day_format": lambda day: "1er" if day == 1 else str(day),
        "weekdays": ["lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche"],
        "ordinals": ["premier", "deuxième", "troisième", "quatrième", "cinquième"],
        "months": [
            "janvier", "février", "mars", "avril", "mai", "juin",
            "juillet", "août", "septembre", "octobre", "novembre", "décembre",
        ],
    },
    "es": {
        "daily": "Cada día",
        "weekly": "Cada semana el {weekday}",
        "monthly": "Cada mes el día {day}",
        "ndom": "Cada mes el {ordinal} {weekday}",
        "yearly": "Cada año el {day} de {month}",
        "day_format": str,
        "date_day_format": str,
        "weekdays": ["lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo"],
        "ordinals": ["primer", "segundo", "tercer", "cuarto", "quinto"],
        "months": [
            "enero", "febrero", "marzo", "abril", "mayo", "junio",
            "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
        ],
    },
}


class RepetitionDescriptionService:
    """
    Formats repetition rules as localized, human-readable text.
    """

    def __init__(
        self,
        default_locale: Optional[str] = None,
        supported_locales: Optional[List[str]] = None,
    ):
        """
        Initialize the RepetitionDescriptionService.

        Args:
            default_locale: Locale used when none or an unsupported one is requested
            supported_locales: Locales that may be rendered
        """
        supported = supported_locales or settings.SUPPORTED_LOCALES
        self.supported_locales = [locale for locale in supported if locale in CATALOG]
        self.default_locale = default_locale or settings.DEFAULT_LOCALE
        if self.default_locale not in self.supported_locales:
            self.default_locale = "en"

    def resolve_locale(self, locale: Optional[str]) -> str:
        """
        Map a requested locale onto a supported one.

        "fr-CA" and "en_US" resolve to their language; anything unsupported
        falls back to the default locale.
        """
        if locale:
            language = locale.replace("_", "-").split("-")[0].lower()
            if language in self.supported_locales:
                return language
            logger.debug(f"Locale '{locale}' not supported, using '{self.default_locale}'")
        return self.default_locale

    def describe(self, rule: RepetitionRule, locale: Optional[str] = None) -> str:
        """
        Describe a repetition rule.

        Args:
            rule: Repetition rule to describe
            locale: Requested locale, e.g. "en" or "de"

        Returns:
            Localized description

        Raises:
            UnsupportedRepetitionTypeException: If the rule cannot be decoded
        """
        phrases = CATALOG[self.resolve_locale(locale)]
        moment = rule.decode()

        if isinstance(moment, DailyMoment):
            return phrases["daily"]
        if isinstance(moment, WeeklyMoment):
            return phrases["weekly"].format(weekday=phrases["weekdays"][moment.weekday - 1])
        if isinstance(moment, MonthlyMoment):
            return phrases["monthly"].format(day=phrases["day_format"](moment.day_of_month))
        if isinstance(moment, NthWeekdayMoment):
            return phrases["ndom"].format(
                ordinal=phrases["ordinals"][moment.ordinal - 1],
                weekday=phrases["weekdays"][moment.weekday - 1],
            )
        if isinstance(moment, YearlyMoment):
            return phrases["yearly"].format(
                month=phrases["months"][moment.month - 1],
                day=phrases["date_day_format"](moment.day),
            )

        raise UnsupportedRepetitionTypeException(rule.type)
