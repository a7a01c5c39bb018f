from __future__ import annotations

import re
from datetime import date
from typing import List, Sequence

from vaxsched.config import SchedulingConfig
from vaxsched.models import Doctor, Patient
from vaxsched.register import Register

AS_OF = date(2026, 10, 19)


def born(age: int) -> date:
    return date(AS_OF.year - age, 1, 1)


def build_register(
    age_weights: Sequence[int],
    weights: Sequence[int],
    daily_doses: Sequence[int],
    ages: Sequence[int],
    answers: Sequence[Sequence[bool]],
    doctor_doses: Sequence[Sequence[int]],
) -> Register:
    """Low-detail register: patients named p000.., doctors d000.., keys w0.."""
    cfg = SchedulingConfig(
        age_weights=list(age_weights),
        attribute_weights={f"w{i}": w for i, w in enumerate(weights)},
        daily_doses=list(daily_doses),
    )
    register = Register(cfg)
    for index, (age, row) in enumerate(zip(ages, answers)):
        register.add_patient(
            Patient(
                name=f"p{index:03d}",
                birthdate=born(age),
                responses={f"w{i}": value for i, value in enumerate(row)},
            ),
            as_of=AS_OF,
        )
    for index, doses in enumerate(doctor_doses):
        register.add_doctor(Doctor(name=f"d{index:03d}", doses_per_day=list(doses)))
    return register


def matches(report: str, pattern: str) -> bool:
    return re.fullmatch(pattern, report.replace("\n", " ")) is not None


def names(patients: List[Patient]) -> List[str]:
    return [p.name for p in patients]
