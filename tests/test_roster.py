from __future__ import annotations

from vaxsched.config import PATIENT_ID_START, SchedulingConfig
from vaxsched.models import Patient
from vaxsched.roster import PatientRoster

from conftest import AS_OF, born, names


def _cfg() -> SchedulingConfig:
    return SchedulingConfig(age_weights=[0, 0, 0, 0, 2, 10, 50, 60, 70], attribute_weights={"a": 5, "b": -3})


def _assert_sorted(roster: PatientRoster) -> None:
    patients = roster.patients()
    for before, after in zip(patients, patients[1:]):
        assert before.priority_score >= after.priority_score
        if before.priority_score == after.priority_score:
            assert before.patient_id < after.patient_id


def _fill(roster: PatientRoster) -> None:
    people = [
        (49, {"a": True}),
        (59, {}),
        (72, {"b": True}),
        (50, {"a": True, "b": True}),
        (12, {}),
        (81, {}),
        (55, {}),
        (40, {"a": True}),
    ]
    for index, (age, answers) in enumerate(people):
        roster.insert(Patient(name=f"p{index}", birthdate=born(age), responses=answers), AS_OF)


def test_ids_are_assigned_in_admission_order() -> None:
    roster = PatientRoster(_cfg())
    _fill(roster)
    ids = sorted(p.patient_id for p in roster)
    assert ids == list(range(PATIENT_ID_START, PATIENT_ID_START + 8))
    assert roster.find_by_id(PATIENT_ID_START).name == "p0"


def test_insert_keeps_priority_order_with_first_come_ties() -> None:
    roster = PatientRoster(_cfg())
    _fill(roster)
    _assert_sorted(roster)
    # 81 -> 70; 72 -> 60-3; 50 -> 10+5-3; 59 and 55 -> 10; 49 and 40 -> 2+5; 12 -> 0
    assert names(roster.patients()) == ["p5", "p2", "p3", "p1", "p6", "p0", "p7", "p4"]


def test_remove_and_lookups_never_raise() -> None:
    roster = PatientRoster(_cfg())
    _fill(roster)
    target = roster.find_by_id(PATIENT_ID_START + 2)
    assert roster.remove(target) is True
    assert roster.remove(target) is False
    assert roster.find_by_id(PATIENT_ID_START + 2) is None
    assert roster.find_by_id(42) is None
    assert roster.find_by_name("zzz") == []
    assert len(roster) == 7


def test_name_search_follows_priority_order() -> None:
    roster = PatientRoster(_cfg())
    _fill(roster)
    assert names(roster.find_by_name("p")) == names(roster.patients())
    assert names(roster.find_by_name("p6")) == ["p6"]


def test_new_ids_are_never_reused_after_removal() -> None:
    roster = PatientRoster(_cfg())
    first = roster.insert(Patient(name="x", birthdate=born(30)), AS_OF)
    roster.remove(first)
    second = roster.insert(Patient(name="y", birthdate=born(30)), AS_OF)
    assert second.patient_id == first.patient_id + 1
    assert not roster.is_empty()


def test_rerank_applies_new_weights_and_keeps_ids() -> None:
    cfg = _cfg()
    roster = PatientRoster(cfg)
    _fill(roster)
    ids_before = {p.name: p.patient_id for p in roster}

    cfg.age_weights = [0] * 9
    cfg.attribute_weights = {"a": 1}
    roster.rerank_all(AS_OF)

    _assert_sorted(roster)
    assert {p.name: p.patient_id for p in roster} == ids_before
    assert names(roster.patients()) == ["p0", "p3", "p7", "p1", "p2", "p4", "p5", "p6"]


def test_rerank_is_idempotent() -> None:
    roster = PatientRoster(_cfg())
    _fill(roster)
    roster.rerank_all(AS_OF)
    once = [(p.patient_id, p.priority_score) for p in roster]
    roster.rerank_all(AS_OF)
    assert [(p.patient_id, p.priority_score) for p in roster] == once
