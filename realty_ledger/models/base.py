"""Base models shared across entities."""

from dataclasses import dataclass


@dataclass
class Address:
    """Postal address of a buyer or project.

    Every field is optional because the REST API serves partial
    addresses for older records.
    """

    street: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = "KE"
