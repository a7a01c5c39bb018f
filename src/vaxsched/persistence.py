"""
Persistence helpers: save the whole register to a directory of CSV files and load it back.

Loading never re-scores anyone; roster order, cached scores, ids and id counters
come back exactly as they were saved.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Dict, List, Tuple

import pandas as pd

from .config import AGE_BUCKETS, DAY_NAMES, DAYS_PER_WEEK, SchedulingConfig
from .logger import get_logger
from .models import Doctor, Patient
from .register import Register

log = get_logger(__name__)

DEFAULT_DATA_DIR = Path("vaxsched-data")
PATIENTS_CSV = "patients.csv"
RESPONSES_CSV = "responses.csv"
DOCTORS_CSV = "doctors.csv"
WEIGHTS_CSV = "weights.csv"
SCHEDULE_TXT = "schedule.txt"

PATIENT_COLUMNS = ["patient_id", "name", "phone", "email", "birthdate", "priority_score"]
RESPONSE_COLUMNS = ["patient_id", "key", "response"]
DOCTOR_COLUMNS = ["doctor_id", "name", "phone", "email"] + [name.lower() for name in DAY_NAMES]
WEIGHT_COLUMNS = ["kind", "key", "value"]


def _read(path: Path) -> pd.DataFrame:
    # Keep "N/A" contact fields as text instead of NaN.
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def patients_to_df(patients: List[Patient]) -> pd.DataFrame:
    records = [
        {
            "patient_id": p.patient_id,
            "name": p.name,
            "phone": p.phone,
            "email": p.email,
            "birthdate": p.birthdate.isoformat() if p.birthdate else "",
            "priority_score": p.priority_score,
        }
        for p in patients
    ]
    return pd.DataFrame.from_records(records, columns=PATIENT_COLUMNS)


def responses_to_df(patients: List[Patient]) -> pd.DataFrame:
    records = []
    for p in patients:
        for key, response in p.responses.items():
            records.append({"patient_id": p.patient_id, "key": key, "response": "yes" if response else "no"})
    return pd.DataFrame.from_records(records, columns=RESPONSE_COLUMNS)


def doctors_to_df(doctors: List[Doctor]) -> pd.DataFrame:
    records = []
    for d in doctors:
        record = {"doctor_id": d.doctor_id, "name": d.name, "phone": d.phone, "email": d.email}
        for day, doses in enumerate(d.doses_per_day):
            record[DAY_NAMES[day].lower()] = doses
        records.append(record)
    return pd.DataFrame.from_records(records, columns=DOCTOR_COLUMNS)


def weights_to_df(register: Register) -> pd.DataFrame:
    cfg = register.cfg
    records = [{"kind": "age", "key": str(bucket), "value": w} for bucket, w in enumerate(cfg.age_weights)]
    records += [{"kind": "attribute", "key": key, "value": w} for key, w in cfg.attribute_weights.items()]
    records += [{"kind": "doses", "key": str(day), "value": n} for day, n in enumerate(cfg.daily_doses)]
    records += [
        {"kind": "counter", "key": "patient", "value": register.roster.next_id},
        {"kind": "counter", "key": "doctor", "value": register.capacity.next_id},
    ]
    return pd.DataFrame.from_records(records, columns=WEIGHT_COLUMNS)


def save_register(register: Register, out_dir: Path = DEFAULT_DATA_DIR) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    patients = register.roster.patients()
    patients_to_df(patients).to_csv(out_dir / PATIENTS_CSV, index=False)
    responses_to_df(patients).to_csv(out_dir / RESPONSES_CSV, index=False)
    doctors_to_df(register.capacity.doctors).to_csv(out_dir / DOCTORS_CSV, index=False)
    weights_to_df(register).to_csv(out_dir / WEIGHTS_CSV, index=False)
    (out_dir / SCHEDULE_TXT).write_text(register.current_schedule, encoding="utf-8")
    log.debug("Saved %d patients and %d doctors to %s", len(patients), len(register.capacity.doctors), out_dir)


def _responses_by_patient(df: pd.DataFrame) -> Dict[int, Dict[str, bool]]:
    responses: Dict[int, Dict[str, bool]] = {}
    for _, row in df.iterrows():
        responses.setdefault(int(row["patient_id"]), {})[str(row["key"])] = row["response"] == "yes"
    return responses


def _patient_from_row(row: pd.Series, responses: Dict[int, Dict[str, bool]]) -> Patient:
    patient_id = int(row["patient_id"])
    return Patient(
        name=str(row["name"]),
        phone=str(row["phone"]),
        email=str(row["email"]),
        birthdate=date.fromisoformat(row["birthdate"]) if row["birthdate"] else None,
        responses=responses.get(patient_id, {}),
        patient_id=patient_id,
        priority_score=int(row["priority_score"]),
    )


def _doctor_from_row(row: pd.Series) -> Doctor:
    return Doctor(
        name=str(row["name"]),
        phone=str(row["phone"]),
        email=str(row["email"]),
        doses_per_day=[int(row[name.lower()]) for name in DAY_NAMES],
        doctor_id=int(row["doctor_id"]),
    )


def _config_from_df(df: pd.DataFrame) -> Tuple[SchedulingConfig, Dict[str, int]]:
    age_weights = [0] * AGE_BUCKETS
    daily_doses = [0] * DAYS_PER_WEEK
    attribute_weights: Dict[str, int] = {}
    counters: Dict[str, int] = {}
    for _, row in df.iterrows():
        kind, key, value = row["kind"], str(row["key"]), int(row["value"])
        if kind == "age":
            age_weights[int(key)] = value
        elif kind == "attribute":
            attribute_weights[key] = value
        elif kind == "doses":
            daily_doses[int(key)] = value
        elif kind == "counter":
            counters[key] = value
        else:
            raise ValueError(f"Unknown weight kind {kind!r} in {WEIGHTS_CSV}")
    cfg = SchedulingConfig(
        age_weights=age_weights, attribute_weights=attribute_weights, daily_doses=daily_doses
    )
    return cfg, counters


def has_saved_state(data_dir: Path = DEFAULT_DATA_DIR) -> bool:
    return all((data_dir / f).exists() for f in [PATIENTS_CSV, RESPONSES_CSV, DOCTORS_CSV, WEIGHTS_CSV])


def load_register(data_dir: Path = DEFAULT_DATA_DIR) -> Register:
    if not has_saved_state(data_dir):
        raise FileNotFoundError(f"Missing patients/responses/doctors/weights CSV under {data_dir}")

    cfg, counters = _config_from_df(_read(data_dir / WEIGHTS_CSV))
    register = Register(cfg)
    responses = _responses_by_patient(_read(data_dir / RESPONSES_CSV))
    register.roster.restore([_patient_from_row(r, responses) for _, r in _read(data_dir / PATIENTS_CSV).iterrows()])
    register.capacity.restore([_doctor_from_row(r) for _, r in _read(data_dir / DOCTORS_CSV).iterrows()])
    register.roster.next_id = max(register.roster.next_id, counters.get("patient", 0))
    register.capacity.next_id = max(register.capacity.next_id, counters.get("doctor", 0))

    schedule_path = data_dir / SCHEDULE_TXT
    if schedule_path.exists():
        register.current_schedule = schedule_path.read_text(encoding="utf-8")
    log.debug("Loaded %d patients and %d doctors from %s", len(register.roster), len(register.capacity.doctors), data_dir)
    return register
