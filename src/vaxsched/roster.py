"""
Priority roster: registered patients kept in service order.
"""

from __future__ import annotations

from datetime import date
from typing import Iterator, List, Optional

from .config import DOCTOR_ID_START, PATIENT_ID_START, SchedulingConfig
from .logger import get_logger
from .models import Patient
from .scoring import score_patient

log = get_logger(__name__)


class PatientRoster:
    """Patients sorted by descending priority score, ties by ascending id.

    Scores are cached on each patient at insertion time; call `rerank_all`
    after the weighting system changes.
    """

    def __init__(self, cfg: SchedulingConfig, next_id: int = PATIENT_ID_START):
        self.cfg = cfg
        self.next_id = next_id
        self._patients: List[Patient] = []

    def __len__(self) -> int:
        return len(self._patients)

    def __iter__(self) -> Iterator[Patient]:
        return iter(self._patients)

    def __getitem__(self, index: int) -> Patient:
        return self._patients[index]

    def is_empty(self) -> bool:
        return not self._patients

    def patients(self) -> List[Patient]:
        return list(self._patients)

    def _take_id(self) -> int:
        if self.next_id >= DOCTOR_ID_START:
            raise RuntimeError("patient id range exhausted")
        patient_id = self.next_id
        self.next_id += 1
        return patient_id

    def _place(self, patient: Patient) -> None:
        key = patient.sort_key()
        index = 0
        while index < len(self._patients) and self._patients[index].sort_key() < key:
            index += 1
        self._patients.insert(index, patient)

    def insert(self, patient: Patient, as_of: Optional[date] = None) -> Patient:
        patient.priority_score = score_patient(patient, self.cfg, as_of)
        patient.patient_id = self._take_id()
        self._place(patient)
        log.debug("Registered patient %s with score %s", patient.patient_id, patient.priority_score)
        return patient

    def restore(self, patients: List[Patient]) -> None:
        """Load already scored patients verbatim, keeping their order and cached scores."""
        self._patients = list(patients)
        if self._patients:
            self.next_id = max(self.next_id, max(p.patient_id for p in self._patients) + 1)

    def remove(self, patient: Patient) -> bool:
        for index, current in enumerate(self._patients):
            if current is patient or current.patient_id == patient.patient_id:
                del self._patients[index]
                log.debug("Removed patient %s", patient.patient_id)
                return True
        return False

    def find_by_id(self, patient_id: int) -> Optional[Patient]:
        return next((p for p in self._patients if p.patient_id == patient_id), None)

    def find_by_name(self, text: str) -> List[Patient]:
        return [p for p in self._patients if text in p.name]

    def rerank_all(self, as_of: Optional[date] = None) -> None:
        # Ids are kept, unlike re-admitting everyone under fresh ids: ties keep breaking
        # by admission order rather than by the previous rank.
        previous = self._patients
        self._patients = []
        for patient in previous:
            patient.priority_score = score_patient(patient, self.cfg, as_of)
            self._place(patient)
        log.info("Re-ranked %d patients", len(self._patients))
