"""Registration data model for the outing sign-up."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from springlog.utils.validation import (
    validate_contact_info,
    validate_employee_identifier,
    validate_name,
)

DIETARY_CATEGORIES = ["None", "Vegetarian", "Halal", "Allergy", "Other"]
DIETARY_NEEDS_NOTE = {"Allergy", "Other"}
DIETARY_SEPARATOR = ": "


class CommutePreference(str, Enum):
    """How a registrant gets to the outing."""

    NEEDS_RIDE = "needs-ride"
    OFFERS_RIDE = "offers-ride"
    SELF_DRIVE = "self-drive"

    @property
    def label(self) -> str:
        return COMMUTE_LABELS[self]

    @classmethod
    def parse(cls, value: str) -> "CommutePreference":
        """
        Parse a stored commute value.

        Accepts the canonical values as well as the display labels written by
        earlier versions of the app.

        Raises:
            ValueError: If the value is not recognized
        """
        if isinstance(value, cls):
            return value
        key = (value or "").strip()
        if key in _LEGACY_COMMUTE:
            return _LEGACY_COMMUTE[key]
        try:
            return cls(key.lower())
        except ValueError:
            raise ValueError(f"Unknown commute preference: {value!r}") from None


COMMUTE_LABELS = {
    CommutePreference.NEEDS_RIDE: "需拼车",
    CommutePreference.OFFERS_RIDE: "有车出车",
    CommutePreference.SELF_DRIVE: "自驾",
}

_LEGACY_COMMUTE = {
    "Need a ride": CommutePreference.NEEDS_RIDE,
    "Offering a ride": CommutePreference.OFFERS_RIDE,
    "Self-drive": CommutePreference.SELF_DRIVE,
    "需拼车": CommutePreference.NEEDS_RIDE,
    "有车出车": CommutePreference.OFFERS_RIDE,
    "自驾": CommutePreference.SELF_DRIVE,
}


def encode_dietary(category: str, note: str = "") -> str:
    """
    Encode a dietary category with an optional note.

    Categories that need elaboration are stored as "<category>: <note>";
    notes on other categories are dropped.

    Examples:
        encode_dietary("Allergy", "peanuts") → "Allergy: peanuts"
        encode_dietary("Vegetarian", "x") → "Vegetarian"
    """
    category = (category or "None").strip()
    note = (note or "").strip()
    if category in DIETARY_NEEDS_NOTE and note:
        return f"{category}{DIETARY_SEPARATOR}{note}"
    return category


def split_dietary(value: str) -> Tuple[str, str]:
    """Split an encoded dietary preference into (category, note)."""
    value = (value or "").strip()
    if not value:
        return "None", ""
    category, sep, note = value.partition(":")
    if not sep:
        return value, ""
    return category.strip(), note.strip()


@dataclass
class RegistrationForm:
    """Fields a registrant submits; id and timestamp are assigned on submit."""

    name: str
    employee_identifier: str
    contact_info: str
    dietary_preference: str = "None"
    activity_interest: str = ""
    commute_preference: CommutePreference = CommutePreference.SELF_DRIVE

    def validate(self) -> Tuple[bool, str]:
        """
        Validate the form.

        Returns:
            Tuple of (is_valid: bool, error_message: str)
        """
        for check, value in (
            (validate_name, self.name),
            (validate_employee_identifier, self.employee_identifier),
            (validate_contact_info, self.contact_info),
        ):
            is_valid, error_msg = check(value)
            if not is_valid:
                return False, error_msg

        category, note = split_dietary(self.dietary_preference)
        if category in DIETARY_NEEDS_NOTE and not note:
            return False, "请补充说明饮食禁忌"
        return True, ""


@dataclass
class Registration:
    """A stored registration for the outing."""

    id: str
    name: str
    employee_identifier: str
    contact_info: str
    dietary_preference: str = "None"
    activity_interest: str = ""
    commute_preference: CommutePreference = CommutePreference.SELF_DRIVE
    submitted_at: str = field(default="")

    def __post_init__(self):
        """Validate registration data."""
        if not self.id or not str(self.id).strip():
            raise ValueError("Registration ID cannot be empty")
        self.id = str(self.id)

        for attr, label in (
            ("name", "Name"),
            ("employee_identifier", "Employee identifier"),
            ("contact_info", "Contact info"),
        ):
            value = getattr(self, attr)
            if value is None or not str(value).strip():
                raise ValueError(f"{label} cannot be empty")
            setattr(self, attr, str(value))

        self.commute_preference = CommutePreference.parse(self.commute_preference)
        self.dietary_preference = self.dietary_preference or "None"
        self.activity_interest = self.activity_interest or ""

    @classmethod
    def from_form(cls, form: RegistrationForm, registration_id: str, submitted_at: str) -> "Registration":
        """Build a full registration from submitted form fields."""
        return cls(
            id=registration_id,
            name=form.name.strip(),
            employee_identifier=form.employee_identifier,
            contact_info=form.contact_info.strip(),
            dietary_preference=form.dietary_preference,
            activity_interest=(form.activity_interest or "").strip(),
            commute_preference=form.commute_preference,
            submitted_at=submitted_at,
        )

    def to_form(self) -> RegistrationForm:
        """Prefill values for the edit form."""
        return RegistrationForm(
            name=self.name,
            employee_identifier=self.employee_identifier,
            contact_info=self.contact_info,
            dietary_preference=self.dietary_preference,
            activity_interest=self.activity_interest,
            commute_preference=self.commute_preference,
        )

    @property
    def ticket_token(self) -> str:
        """Short code shown on the ticket view."""
        return self.id[-6:].upper()

    @property
    def has_special_diet(self) -> bool:
        category, _ = split_dietary(self.dietary_preference)
        return category not in ("None", "")

    def dietary_note(self) -> Optional[str]:
        _, note = split_dietary(self.dietary_preference)
        return note or None
