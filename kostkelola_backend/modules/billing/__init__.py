"""Automatic payment reminders for leases about to end."""

from .mailer import Mailer, SmtpMailer

__all__ = ["Mailer", "SmtpMailer"]
