"""
Centralized email subject builders.

Subjects live in code; bodies remain in Jinja templates.
"""

from ..core.config import settings


class EmailSubject:
    """Static builders for email subjects."""

    @staticmethod
    def registration_notification(name: str) -> str:
        return f"Neue Trainingsanmeldung: {name.strip() or 'Unbekannt'}"

    @staticmethod
    def sepa_mandate_confirmation(reference: str) -> str:
        return f"Ihr SEPA-Lastschriftmandat {reference} bei {settings.school_name}"
