"""
Typed containers for the people tracked by the register.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Tuple

from .config import AGE_BUCKETS, DAY_NAMES, DAYS_PER_WEEK, check_count, check_day


def whole_years_between(start: date, end: date) -> int:
    years = end.year - start.year
    if (end.month, end.day) < (start.month, start.day):
        years -= 1
    return years


def format_date(day: date) -> str:
    return f"{day.month}/{day.day}/{day.year}"


@dataclass
class Patient:
    name: str = "N/A"
    phone: str = "N/A"
    email: str = "N/A"
    birthdate: Optional[date] = None
    responses: Dict[str, bool] = field(default_factory=dict)
    patient_id: int = -1  # assigned on registration
    priority_score: int = -1  # cached on registration, refreshed by a re-rank

    def age_in_decades(self, as_of: Optional[date] = None) -> int:
        if self.birthdate is None:
            raise ValueError(f"patient {self.name!r} has no birthdate")
        decades = whole_years_between(self.birthdate, as_of or date.today()) // 10
        return max(0, min(decades, AGE_BUCKETS - 1))

    def sort_key(self) -> Tuple[int, int]:
        # Higher priority first, then first registered.
        return (-self.priority_score, self.patient_id)

    def contact_details(self) -> str:
        return f"{self.name}   ID: {self.patient_id}, phone: {self.phone}, email: {self.email}"

    def __str__(self) -> str:
        lines = [
            f"{self.name} (patient)",
            f"\tPhone: {self.phone}",
            f"\tEmail: {self.email}",
            f"\tBirthdate: {format_date(self.birthdate) if self.birthdate else 'N/A'}",
            f"\tPatient ID: {self.patient_id}",
        ]
        for key in sorted(self.responses):
            lines.append(f"\t{key}: {'yes' if self.responses[key] else 'no'}")
        return "\n".join(lines)


@dataclass
class Doctor:
    name: str = "N/A"
    phone: str = "N/A"
    email: str = "N/A"
    doses_per_day: List[int] = field(default_factory=lambda: [0] * DAYS_PER_WEEK)
    doctor_id: int = -1  # assigned on registration

    def __post_init__(self) -> None:
        if len(self.doses_per_day) != DAYS_PER_WEEK:
            raise ValueError(f"doses_per_day needs {DAYS_PER_WEEK} entries, got {len(self.doses_per_day)}")
        for doses in self.doses_per_day:
            check_count(doses, "doctor capacity")

    def capacity(self, day: int) -> int:
        return self.doses_per_day[check_day(day)]

    def set_capacity(self, day: int, doses: int) -> None:
        self.doses_per_day[check_day(day)] = check_count(doses, "doctor capacity")

    def __str__(self) -> str:
        lines = [
            f"{self.name} (doctor)",
            f"\tPhone: {self.phone}",
            f"\tEmail: {self.email}",
            f"\tDoctor ID: {self.doctor_id}",
            "\tVaccinations per day:",
        ]
        for day, doses in enumerate(self.doses_per_day):
            lines.append(f"\t\t{DAY_NAMES[day]}: {doses}")
        return "\n".join(lines)
