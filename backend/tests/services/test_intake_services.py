"""Registration requests and SEPA mandates."""

import re
from unittest.mock import Mock

import pytest

from tennisplan.core.exceptions import BusinessRuleException, NotFoundException, ServiceException
from tennisplan.core.timezone_utils import get_school_today
from tennisplan.models.enums import RegistrationStatus
from tennisplan.schemas.intake import RegistrationCreate, SepaMandateCreate
from tennisplan.services.email import EmailService
from tennisplan.services.registration_service import RegistrationService
from tennisplan.services.sepa_mandate_service import SepaMandateService, generate_mandate_reference


@pytest.fixture
def email_service():
    return Mock(spec=EmailService)


def _registration(**overrides):
    data = {
        "name": "Max Muster",
        "email": "max@example.com",
        "age_years": 12,
        "experience_level": "Anfänger",
        "preferred_time": "Dienstag nachmittags",
    }
    data.update(overrides)
    return RegistrationCreate(**data)


def _mandate(**overrides):
    data = {
        "first_name": "Petra",
        "last_name": "Muster",
        "street": "Hauptstr. 1",
        "postal_code": "12345",
        "city": "Musterstadt",
        "iban": "DE89 3704 0044 0532 0130 00",
        "email": "petra@example.com",
        "consent": True,
    }
    data.update(overrides)
    return SepaMandateCreate(**data)


class TestRegistrationService:
    def test_submit_notifies_school(self, db, email_service):
        registration = RegistrationService(db, email_service).submit(_registration())

        assert registration.status == RegistrationStatus.NEW.value
        email_service.send_registration_notification.assert_called_once_with(registration)

    def test_submit_survives_mail_failure(self, db):
        failing = Mock(spec=EmailService)
        failing.send_registration_notification.return_value = False

        registration = RegistrationService(db, failing).submit(_registration())

        assert registration.id is not None

    def test_accept_creates_player(self, db, email_service):
        service = RegistrationService(db, email_service)
        registration = service.submit(_registration())

        accepted = service.accept(registration.id)

        assert accepted.status == RegistrationStatus.ACCEPTED.value
        assert accepted.player is not None
        assert accepted.player.name == "Max Muster"
        assert accepted.player.contact_email == "max@example.com"
        assert "Anfänger" in accepted.player.notes
        assert accepted.processed_at is not None

    def test_decline(self, db, email_service):
        service = RegistrationService(db, email_service)
        registration = service.submit(_registration())

        declined = service.decline(registration.id)

        assert declined.status == RegistrationStatus.DECLINED.value
        assert declined.player_id is None

    def test_processed_registration_cannot_change(self, db, email_service):
        service = RegistrationService(db, email_service)
        registration = service.submit(_registration())
        service.decline(registration.id)

        with pytest.raises(BusinessRuleException):
            service.accept(registration.id)

    def test_list_by_status(self, db, email_service):
        service = RegistrationService(db, email_service)
        first = service.submit(_registration())
        service.submit(_registration(name="Mia", email="mia@example.com"))
        service.accept(first.id)

        new = service.list_registrations(RegistrationStatus.NEW)

        assert [r.name for r in new] == ["Mia"]
        assert len(service.list_registrations()) == 2

    def test_unknown_registration(self, db, email_service):
        with pytest.raises(NotFoundException):
            RegistrationService(db, email_service).get_registration("01HZZZZZZZZZZZZZZZZZZZZZZZ")


class TestSepaMandateService:
    def test_reference_format(self):
        reference = generate_mandate_reference(get_school_today())

        assert re.fullmatch(r"SEPA-\d{8}-[0-9A-Z]{6}", reference)
        assert reference[5:13] == get_school_today().strftime("%Y%m%d")

    def test_submit(self, db, email_service):
        mandate = SepaMandateService(db, email_service).submit(_mandate())

        assert mandate.iban == "DE89370400440532013000"
        assert mandate.signature_date == get_school_today()
        assert mandate.mandate_reference.startswith("SEPA-")
        assert mandate.guardian_name is None
        email_service.send_sepa_mandate_confirmation.assert_called_once_with(mandate)

    def test_minor_keeps_guardian(self, db, email_service):
        mandate = SepaMandateService(db, email_service).submit(_mandate(is_minor=True, guardian_name="Paul Muster"))

        assert mandate.account_holder == "Paul Muster"

    def test_unknown_player(self, db, email_service):
        with pytest.raises(NotFoundException):
            SepaMandateService(db, email_service).submit(_mandate(player_id="01HZZZZZZZZZZZZZZZZZZZZZZZ"))

    def test_link_and_unlink_player(self, db, email_service, player_anna):
        service = SepaMandateService(db, email_service)
        mandate = service.submit(_mandate())

        assert service.link_player(mandate.id, player_anna.id).player_id == player_anna.id
        assert service.link_player(mandate.id, None).player_id is None

    def test_console_provider_does_not_raise(self, db):
        mandate = SepaMandateService(db).submit(_mandate())

        assert mandate.id is not None


def test_send_email_wraps_delivery_errors(db):
    class BrokenEmailService(EmailService):
        def _configure(self) -> None:
            pass

        def _deliver(self, email_data):
            raise RuntimeError("smtp down")

    with pytest.raises(ServiceException) as exc_info:
        BrokenEmailService(db).send_email("a@example.com", "Hi", "<p>Hi</p>")

    assert exc_info.value.code == "EMAIL_SEND_FAILED"
