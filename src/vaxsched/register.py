"""
The register: one process-wide unit of patients, doctors, weighting and the last schedule.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

from .capacity import CapacityTable
from .config import NO_SCHEDULE, SchedulingConfig
from .logger import get_logger
from .models import Doctor, Patient
from .roster import PatientRoster
from .scheduling import ScheduleGenerator, SchedulePlan

log = get_logger(__name__)


class Register:
    def __init__(self, cfg: Optional[SchedulingConfig] = None):
        self.cfg = cfg or SchedulingConfig()
        self.roster = PatientRoster(self.cfg)
        self.capacity = CapacityTable(self.cfg)
        self.current_schedule = NO_SCHEDULE

    # Patients

    def add_patient(self, patient: Patient, as_of: Optional[date] = None) -> Patient:
        return self.roster.insert(patient, as_of)

    def remove_patient(self, patient_id: int) -> Optional[Patient]:
        patient = self.roster.find_by_id(patient_id)
        if patient is not None:
            self.roster.remove(patient)
        return patient

    def find_patient(self, patient_id: int) -> Optional[Patient]:
        return self.roster.find_by_id(patient_id)

    def find_patients(self, text: str) -> List[Patient]:
        return self.roster.find_by_name(text)

    def has_patients(self) -> bool:
        return not self.roster.is_empty()

    # Doctors

    def add_doctor(self, doctor: Doctor) -> Doctor:
        return self.capacity.add_doctor(doctor)

    def remove_doctor(self, doctor_id: int) -> Optional[Doctor]:
        doctor = self.capacity.find_by_id(doctor_id)
        if doctor is not None:
            self.capacity.remove_doctor(doctor)
        return doctor

    def find_doctor(self, doctor_id: int) -> Optional[Doctor]:
        return self.capacity.find_by_id(doctor_id)

    def find_doctors(self, text: str) -> List[Doctor]:
        return self.capacity.find_by_name(text)

    def has_doctors(self) -> bool:
        return self.capacity.has_doctors()

    # Weighting and supply; every weighting change re-ranks the roster.

    def set_daily_doses(self, day: int, doses: int) -> None:
        self.capacity.set_global_capacity(day, doses)

    def set_age_weight(self, bucket: int, weight: int, as_of: Optional[date] = None) -> None:
        self.cfg.set_age_weight(bucket, weight)
        self.roster.rerank_all(as_of)

    def set_attribute_weight(self, key: str, weight: int, as_of: Optional[date] = None) -> None:
        self.cfg.attribute_weights[key] = int(weight)
        self.roster.rerank_all(as_of)

    def remove_attribute_weight(self, key: str, as_of: Optional[date] = None) -> bool:
        if key not in self.cfg.attribute_weights:
            return False
        del self.cfg.attribute_weights[key]
        self.roster.rerank_all(as_of)
        return True

    def replace_attribute_weights(self, weights: Dict[str, int], as_of: Optional[date] = None) -> None:
        self.cfg.attribute_weights = {key: int(value) for key, value in weights.items()}
        self.roster.rerank_all(as_of)

    # Scheduling

    def can_administer(self) -> bool:
        return self.capacity.any_day_serviceable()

    def plan_schedule(self, start_day: int, active_days: int, as_of: Optional[date] = None) -> SchedulePlan:
        plan = ScheduleGenerator(self.roster, self.capacity).plan(start_day, active_days, as_of)
        self.current_schedule = plan.report
        return plan

    def generate_schedule(self, start_day: int, active_days: int, as_of: Optional[date] = None) -> str:
        return self.plan_schedule(start_day, active_days, as_of).report

    def reset(self) -> None:
        self.cfg = SchedulingConfig()
        self.roster = PatientRoster(self.cfg)
        self.capacity = CapacityTable(self.cfg)
        self.current_schedule = NO_SCHEDULE
        log.info("Register reset")
