"""
Error taxonomy shared by the scheduling components.
"""

from __future__ import annotations


class MedschedError(Exception):
    """Base class for every error raised by medsched."""


class InvalidFormat(MedschedError, ValueError):
    """A time string is not ``H:mm``/``HH:mm`` within 00:00-23:59."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid time format {value!r}. Use HH:mm.")


class ResourceExhausted(MedschedError):
    """No free slot was found within one full day cycle."""

    def __init__(self, day: str, requested: str):
        self.day = day
        self.requested = requested
        super().__init__(f"No free slot left on {day} (requested {requested})")


class NotFound(MedschedError, KeyError):
    def __init__(self, medicine: str):
        self.medicine = medicine
        super().__init__(medicine)

    def __str__(self) -> str:
        return f"No schedule or medicine found for {self.medicine!r}"


class DuplicateMedicine(MedschedError):
    def __init__(self, medicine: str):
        self.medicine = medicine
        super().__init__(f"Medicine {medicine!r} is already in the list")


class InvalidName(MedschedError, ValueError):
    pass
