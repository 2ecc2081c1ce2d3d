"""Tests for the log-only account mailer."""

from __future__ import annotations

import logging

from wise_advice.core.settings import settings
from wise_advice.services.mailer import Mailer, get_mailer


def test_send_logs_without_keeping_messages(caplog) -> None:
    mailer = get_mailer()
    state_before = dict(vars(mailer))

    with caplog.at_level(logging.INFO, logger="wise_advice.services.mailer"):
        for index in range(50):
            mailer.send(f"user{index}@example.com", "Hello", "Body")

    assert dict(vars(mailer)) == state_before
    assert not hasattr(mailer, "outbox")
    assert sum("would send" in record.getMessage() for record in caplog.records) == 50


def test_confirmation_mail_links_to_api() -> None:
    message = Mailer().send_confirmation("carol@example.com", "carol", "abc.def.ghi")

    assert message.to == "carol@example.com"
    assert f"{settings.public_base_url}/api/auth/confirm-email/abc.def.ghi" in message.body
    assert message.body.startswith("Hi carol!")


def test_password_reset_mail_links_to_api() -> None:
    message = Mailer().send_password_reset("carol@example.com", "carol", "abc.def.ghi")

    assert f"{settings.public_base_url}/api/auth/password-reset/abc.def.ghi" in message.body
