"""
Centralized scheduling defaults and the operator-tunable weighting system.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List


DAY_NAMES: List[str] = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
DAYS_PER_WEEK = 7
AGE_BUCKETS = 9  # bucket 8 is 80 and over

PATIENT_ID_START = 1000
DOCTOR_ID_START = 900_000  # distinct id range for doctors

NO_SCHEDULE = "--No Schedule--\n"

DEFAULT_AGE_WEIGHTS: List[int] = [0, 0, 0, 0, 5, 10, 30, 55, 60]
DEFAULT_ATTRIBUTE_WEIGHTS: Dict[str, int] = {
    "High risk employment": 3,
    "Asthma": 8,
    "COPD": 6,
    "Scarred Lung Tissue": 8,
    "Smoking": 6,
}


def check_day(day: int) -> int:
    if not isinstance(day, int) or not 0 <= day < DAYS_PER_WEEK:
        raise ValueError(f"day index must be in 0..{DAYS_PER_WEEK - 1}, got {day!r}")
    return day


def check_bucket(bucket: int) -> int:
    if not isinstance(bucket, int) or not 0 <= bucket < AGE_BUCKETS:
        raise ValueError(f"age bucket must be in 0..{AGE_BUCKETS - 1}, got {bucket!r}")
    return bucket


def check_count(value: int, what: str) -> int:
    if not isinstance(value, int) or value < 0:
        raise ValueError(f"{what} must be a non-negative integer, got {value!r}")
    return value


@dataclass
class SchedulingConfig:
    age_weights: List[int] = field(default_factory=lambda: list(DEFAULT_AGE_WEIGHTS))
    # Applied only on a "yes" response; a negative weight subtracts on "yes".
    attribute_weights: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_ATTRIBUTE_WEIGHTS))
    daily_doses: List[int] = field(default_factory=lambda: [0] * DAYS_PER_WEEK)

    def __post_init__(self) -> None:
        if len(self.age_weights) != AGE_BUCKETS:
            raise ValueError(f"age_weights needs {AGE_BUCKETS} entries, got {len(self.age_weights)}")
        if len(self.daily_doses) != DAYS_PER_WEEK:
            raise ValueError(f"daily_doses needs {DAYS_PER_WEEK} entries, got {len(self.daily_doses)}")
        for dose in self.daily_doses:
            check_count(dose, "daily doses")

    def age_weight(self, bucket: int) -> int:
        return self.age_weights[check_bucket(bucket)]

    def set_age_weight(self, bucket: int, weight: int) -> None:
        self.age_weights[check_bucket(bucket)] = int(weight)

    def doses_for(self, day: int) -> int:
        return self.daily_doses[check_day(day)]

    def set_doses(self, day: int, doses: int) -> None:
        self.daily_doses[check_day(day)] = check_count(doses, "daily doses")
