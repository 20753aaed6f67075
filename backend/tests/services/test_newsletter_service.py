from unittest.mock import Mock

import pytest

from tennisplan.core.exceptions import ServiceException, ValidationException
from tennisplan.models import Player
from tennisplan.schemas.newsletter import NewsletterRequest
from tennisplan.services.email import EmailService
from tennisplan.services.newsletter_service import NewsletterService


@pytest.fixture
def email_service():
    return Mock(spec=EmailService)


def _request(**overrides):
    data = {"subject": "Sommercamp", "body": "Hallo zusammen,\n\ndas Camp startet im Juli."}
    data.update(overrides)
    return NewsletterRequest(**data)


def test_default_recipients_are_deduplicated(db, player_anna, player_ben):
    db.add_all([Player(name="Anna 2", contact_email="ANNA@example.com"), Player(name="Ohne Mail")])
    db.commit()

    recipients = NewsletterService(db).default_recipients()

    assert recipients == ["ANNA@example.com", "ben@example.com"]


def test_send_to_all_players(db, email_service, player_anna, player_ben):
    result = NewsletterService(db, email_service=email_service).send(_request())

    assert result.sent == 2
    assert result.failed == 0
    assert email_service.send_email.call_count == 2
    kwargs = email_service.send_email.call_args.kwargs
    assert kwargs["subject"] == "Sommercamp"
    assert "das Camp startet im Juli." in kwargs["html_content"]
    assert kwargs["kind"] == "newsletter"


def test_explicit_recipients(db, email_service, player_anna):
    result = NewsletterService(db, email_service=email_service).send(
        _request(to=["x@example.com", " x@example.com ", ""], from_name="Trainerteam")
    )

    assert result.sent == 1
    assert email_service.send_email.call_args.kwargs["from_name"] == "Trainerteam"


def test_no_recipients(db, email_service):
    with pytest.raises(ValidationException) as exc_info:
        NewsletterService(db, email_service=email_service).send(_request())

    assert exc_info.value.code == "NO_RECIPIENTS"


def test_partial_failures_are_collected(db, email_service, player_anna, player_ben):
    def send(to_email, **kwargs):
        if to_email == "ben@example.com":
            try:
                raise RuntimeError("550 mailbox unavailable")
            except RuntimeError as e:
                raise ServiceException("Email sending failed: 550 mailbox unavailable", code="EMAIL_SEND_FAILED") from e
        return {"id": "1"}

    email_service.send_email.side_effect = send

    result = NewsletterService(db, email_service=email_service).send(_request())

    assert result.sent == 1
    assert result.failed == 1
    assert result.errors == ["ben@example.com: 550 mailbox unavailable"]


def test_all_failures_raise(db, email_service, player_anna):
    email_service.send_email.side_effect = ServiceException("down", code="EMAIL_SEND_FAILED")

    with pytest.raises(ServiceException) as exc_info:
        NewsletterService(db, email_service=email_service).send(_request())

    assert exc_info.value.code == "NEWSLETTER_FAILED"


def test_subject_required():
    with pytest.raises(ValueError):
        _request(subject="  ")


def test_error_without_cause_uses_message(db, email_service, player_anna, player_ben):
    def send(to_email, **kwargs):
        if to_email == "anna@example.com":
            raise ServiceException("Resend API key not configured", code="EMAIL_NOT_CONFIGURED")
        return {"id": "1"}

    email_service.send_email.side_effect = send

    result = NewsletterService(db, email_service=email_service).send(_request())

    assert result.errors == ["anna@example.com: Resend API key not configured"]
