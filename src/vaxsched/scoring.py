"""
Scoring policy: fold a patient's age and questionnaire answers into one priority score.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Tuple

from .config import AGE_BUCKETS, SchedulingConfig
from .models import Patient


def age_label(bucket: int) -> str:
    return "Age in 80s+" if bucket == AGE_BUCKETS - 1 else f"Age in {bucket}0s"


def score_breakdown(
    patient: Patient, cfg: SchedulingConfig, as_of: Optional[date] = None
) -> List[Tuple[str, int]]:
    """Points per criterion, the age decade first, then every weighted "yes" answer."""
    bucket = patient.age_in_decades(as_of)
    parts = [(age_label(bucket), cfg.age_weight(bucket))]
    for key, weight in cfg.attribute_weights.items():
        # Only a "yes" counts; negative weights subtract, a "no" never contributes.
        if patient.responses.get(key) is True:
            parts.append((key, weight))
    return parts


def score_patient(patient: Patient, cfg: SchedulingConfig, as_of: Optional[date] = None) -> int:
    return sum(points for _, points in score_breakdown(patient, cfg, as_of))
