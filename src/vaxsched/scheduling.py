"""
Scheduling algorithm: hand ranked patients to doctors round-robin, one active weekday at a time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

import pandas as pd

from .capacity import CapacityTable
from .config import DAY_NAMES, DAYS_PER_WEEK, check_day
from .logger import get_logger
from .models import Doctor, Patient, format_date
from .roster import PatientRoster

log = get_logger(__name__)


class CannotScheduleError(RuntimeError):
    """No schedule can be produced: no doctors, or no weekday can ever give a dose."""


@dataclass
class DayPlan:
    day_number: int
    weekday: int
    ceiling: int
    rotation_start: int
    rotation_end: int
    assignments: List[Tuple[Doctor, List[Patient]]] = field(default_factory=list)

    @property
    def weekday_name(self) -> str:
        return DAY_NAMES[self.weekday]

    @property
    def total(self) -> int:
        return sum(len(patients) for _, patients in self.assignments)


@dataclass
class SchedulePlan:
    as_of: date
    days: List[DayPlan]
    unassigned: List[Patient]
    report: str


class ScheduleGenerator:
    def __init__(self, roster: PatientRoster, capacity: CapacityTable):
        self.roster = roster
        self.capacity = capacity
        self.patient_cursor = 0
        self.rotation_cursor = 0

    def _check_preconditions(self) -> None:
        if not self.capacity.has_doctors():
            raise CannotScheduleError("No doctors in the register at schedule generation")
        if not self.capacity.any_day_serviceable():
            raise CannotScheduleError("No scheduling alignments in the register at schedule generation")

    def _fill_day(self, day_number: int, weekday: int, ceiling: int) -> DayPlan:
        doctors = self.capacity.doctors
        todays: List[List[Patient]] = [[] for _ in doctors]
        day = DayPlan(
            day_number=day_number,
            weekday=weekday,
            ceiling=ceiling,
            rotation_start=self.rotation_cursor,
            rotation_end=self.rotation_cursor,
        )
        remaining = ceiling
        while remaining > 0 and self.patient_cursor < len(self.roster):
            doctor = doctors[self.rotation_cursor]
            if len(todays[self.rotation_cursor]) < doctor.capacity(weekday):
                todays[self.rotation_cursor].append(self.roster[self.patient_cursor])
                self.patient_cursor += 1
                remaining -= 1
            # A full doctor still uses up a rotation turn.
            self.rotation_cursor = (self.rotation_cursor + 1) % len(doctors)
        day.rotation_end = self.rotation_cursor
        day.assignments = [(doctor, patients) for doctor, patients in zip(doctors, todays) if patients]
        return day

    def plan(self, start_day: int, active_days: int, as_of: Optional[date] = None) -> SchedulePlan:
        check_day(start_day)
        if not isinstance(active_days, int) or active_days < 1:
            raise ValueError(f"number of active days must be a positive integer, got {active_days!r}")
        self._check_preconditions()

        ceilings = self.capacity.serviceable_by_day()
        self.patient_cursor = 0
        self.rotation_cursor = 0
        weekday = start_day
        days: List[DayPlan] = []
        while len(days) < active_days and self.patient_cursor < len(self.roster):
            ceiling = int(ceilings[weekday])
            if ceiling > 0:
                days.append(self._fill_day(len(days) + 1, weekday, ceiling))
            weekday = (weekday + 1) % DAYS_PER_WEEK

        as_of = as_of or date.today()
        unassigned = [self.roster[i] for i in range(self.patient_cursor, len(self.roster))]
        report = render_report(days, as_of)
        log.info(
            "Scheduled %d patients over %d active days, %d left unassigned",
            self.patient_cursor,
            len(days),
            len(unassigned),
        )
        return SchedulePlan(as_of=as_of, days=days, unassigned=unassigned, report=report)

    def generate(self, start_day: int, active_days: int, as_of: Optional[date] = None) -> str:
        return self.plan(start_day, active_days, as_of).report


def render_report(days: List[DayPlan], as_of: date) -> str:
    lines = [f"Schedule as of {format_date(as_of)}:"]
    for day in days:
        lines.append(f"Day {day.day_number} ({day.weekday_name}):")
        for doctor, patients in day.assignments:
            lines.append(f"{doctor.name} will vaccinate:")
            lines.extend(f"\t{patient.contact_details()}" for patient in patients)
    return "\n".join(lines) + "\n"


def plan_to_df(plan: SchedulePlan) -> pd.DataFrame:
    records = []
    for day in plan.days:
        for doctor, patients in day.assignments:
            for slot, patient in enumerate(patients, start=1):
                records.append(
                    {
                        "day_number": day.day_number,
                        "weekday": day.weekday_name,
                        "doctor_id": doctor.doctor_id,
                        "doctor_name": doctor.name,
                        "slot": slot,
                        "patient_id": patient.patient_id,
                        "patient_name": patient.name,
                        "priority_score": patient.priority_score,
                        "phone": patient.phone,
                        "email": patient.email,
                    }
                )
    columns = [
        "day_number", "weekday", "doctor_id", "doctor_name", "slot",
        "patient_id", "patient_name", "priority_score", "phone", "email",
    ]
    return pd.DataFrame.from_records(records, columns=columns)
