"""Customer aggregate."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from invoicing.domain.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Customer:

    id: str
    first_name: str
    last_name: str
    email: str
    birth_date: date
    phone: str | None = None
    address: str | None = None
    active: bool = True
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @staticmethod
    def create(
        customer_id: str,
        first_name: str,
        last_name: str,
        email: str,
        birth_date: date,
        phone: str | None = None,
        address: str | None = None,
    ) -> Customer:
        """Create a new customer, validating names, email and birth date."""
        return Customer(
            id=customer_id,
            first_name=_required(first_name, "first name"),
            last_name=_required(last_name, "last name"),
            email=_normalized_email(email),
            birth_date=_past_date(birth_date),
            phone=phone,
            address=address,
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def age(self, today: date | None = None) -> int:
        today = today or date.today()
        years = today.year - self.birth_date.year
        # Birthday not reached yet this year
        if (today.month, today.day) < (self.birth_date.month, self.birth_date.day):
            years -= 1
        return years

    def update_details(
        self,
        first_name: str | None = None,
        last_name: str | None = None,
        email: str | None = None,
        birth_date: date | None = None,
        phone: str | None = None,
        address: str | None = None,
    ) -> None:
        """Change the given fields; None leaves a field as it is.

        Every value is validated before any field changes.  Email
        uniqueness is checked by the caller.
        """
        first = _required(first_name, "first name") if first_name is not None else self.first_name
        last = _required(last_name, "last name") if last_name is not None else self.last_name
        mail = _normalized_email(email) if email is not None else self.email
        born = _past_date(birth_date) if birth_date is not None else self.birth_date

        self.first_name, self.last_name, self.email, self.birth_date = first, last, mail, born
        if phone is not None:
            self.phone = phone
        if address is not None:
            self.address = address
        self.updated_at = _utcnow()


def _required(value: str | None, label: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"Customer {label} is required")
    return value.strip()


def _normalized_email(email: str | None) -> str:
    email = (email or "").strip().lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError(f"Invalid email address: {email!r}")
    return email


def _past_date(birth_date: date) -> date:
    if birth_date > date.today():
        raise ValidationError("Birth date cannot be in the future")
    return birth_date
