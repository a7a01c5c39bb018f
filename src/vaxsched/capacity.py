"""
Doctor roster and daily capacity bookkeeping.
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from .config import DAYS_PER_WEEK, DOCTOR_ID_START, SchedulingConfig, check_day
from .logger import get_logger
from .models import Doctor

log = get_logger(__name__)


class CapacityTable:
    """Per-doctor weekday capacity plus the global weekday dose supply.

    Doctors keep their registration order, which is also the rotation order
    used by the scheduler.
    """

    def __init__(self, cfg: SchedulingConfig, next_id: int = DOCTOR_ID_START):
        self.cfg = cfg
        self.next_id = next_id
        self.doctors: List[Doctor] = []

    def add_doctor(self, doctor: Doctor) -> Doctor:
        doctor.doctor_id = self.next_id
        self.next_id += 1
        self.doctors.append(doctor)
        log.debug("Registered doctor %s", doctor.doctor_id)
        return doctor

    def restore(self, doctors: List[Doctor]) -> None:
        self.doctors = list(doctors)
        if self.doctors:
            self.next_id = max(self.next_id, max(d.doctor_id for d in self.doctors) + 1)

    def remove_doctor(self, doctor: Doctor) -> bool:
        for index, current in enumerate(self.doctors):
            if current is doctor or current.doctor_id == doctor.doctor_id:
                del self.doctors[index]
                log.debug("Removed doctor %s", doctor.doctor_id)
                return True
        return False

    def has_doctors(self) -> bool:
        return bool(self.doctors)

    def find_by_id(self, doctor_id: int) -> Optional[Doctor]:
        return next((d for d in self.doctors if d.doctor_id == doctor_id), None)

    def find_by_name(self, text: str) -> List[Doctor]:
        return [d for d in self.doctors if text in d.name]

    def daily_capacity(self, doctor_id: int, day: int) -> int:
        doctor = self.find_by_id(doctor_id)
        if doctor is None:
            raise KeyError(f"unknown doctor id {doctor_id}")
        return doctor.capacity(day)

    def set_daily_capacity(self, doctor_id: int, day: int, doses: int) -> None:
        doctor = self.find_by_id(doctor_id)
        if doctor is None:
            raise KeyError(f"unknown doctor id {doctor_id}")
        doctor.set_capacity(day, doses)

    def global_capacity(self, day: int) -> int:
        return self.cfg.doses_for(day)

    def set_global_capacity(self, day: int, doses: int) -> None:
        self.cfg.set_doses(day, doses)

    def serviceable_by_day(self) -> np.ndarray:
        """Effective ceiling for every weekday: min(dose supply, summed doctor capacity)."""
        if self.doctors:
            doctor_totals = np.array([d.doses_per_day for d in self.doctors], dtype=np.int64).sum(axis=0)
        else:
            doctor_totals = np.zeros(DAYS_PER_WEEK, dtype=np.int64)
        return np.minimum(np.array(self.cfg.daily_doses, dtype=np.int64), doctor_totals)

    def max_serviceable_on_day(self, day: int) -> int:
        return int(self.serviceable_by_day()[check_day(day)])

    def any_day_serviceable(self) -> bool:
        return bool((self.serviceable_by_day() > 0).any())
