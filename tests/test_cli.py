from __future__ import annotations

from pathlib import Path
from typing import List

import pandas as pd
from typer.testing import CliRunner

from vaxsched.cli import app
from vaxsched.persistence import load_register

runner = CliRunner()


def _run(data_dir: Path, args: List[str], input: str = ""):
    return runner.invoke(app, ["--data-dir", str(data_dir), *args], input=input)


def _seed(data_dir: Path) -> None:
    assert _run(data_dir, ["add-doctor", "--name", "Dr Grey", "1", "1", "1", "1", "1", "1", "1"]).exit_code == 0
    assert _run(data_dir, ["add-doctor", "--name", "Dr Blue", "0", "2", "0", "0", "0", "0", "0"]).exit_code == 0
    for day, doses in [("Sunday", "10"), ("monday", "2")]:
        assert _run(data_dir, ["set-doses", day, doses]).exit_code == 0
    patients = [
        ("Young Yu", "01/01/2001", ["Asthma=no"]),
        ("Old Olu", "03/15/1931", ["Asthma=yes"]),
        ("Mid Mia", "07/04/1970", []),
    ]
    for name, birthdate, answers in patients:
        args = ["add-patient", "--name", name, "--birthdate", birthdate]
        for answer in answers:
            args += ["--answer", answer]
        result = _run(data_dir, args)
        assert result.exit_code == 0, result.output
        assert "patient ID number is" in result.output


def test_register_and_schedule_end_to_end(tmp_path: Path) -> None:
    _seed(tmp_path)
    csv_out = tmp_path / "plan.csv"
    png_out = tmp_path / "plan.png"
    result = _run(
        tmp_path,
        ["schedule", "--start", "Sunday", "--days", "2", "--csv-out", str(csv_out), "--png-out", str(png_out)],
    )
    assert result.exit_code == 0, result.output
    assert "Day 1 (Sunday):" in result.output
    assert "Day 2 (Monday):" in result.output
    # Monday starts where the rotation stopped on Sunday, so Dr Blue is offered Mid Mia first.
    assert result.output.index("Old Olu") < result.output.index("Young Yu") < result.output.index("Mid Mia")

    df = pd.read_csv(csv_out)
    assert df["patient_name"].tolist() == ["Old Olu", "Young Yu", "Mid Mia"]
    assert df["doctor_name"].tolist() == ["Dr Grey", "Dr Grey", "Dr Blue"]
    assert png_out.exists()

    shown = _run(tmp_path, ["show-schedule"])
    assert "Day 2 (Monday):" in shown.output
    assert "Old Olu" in load_register(tmp_path).current_schedule


def test_schedule_without_doctors_fails(tmp_path: Path) -> None:
    assert _run(tmp_path, ["add-patient", "--name", "Solo", "--birthdate", "01/01/1990"]).exit_code == 0
    result = _run(tmp_path, ["schedule", "--start", "Monday", "--days", "1"])
    assert result.exit_code == 1
    assert "Cannot schedule" in result.output
    assert "No Schedule" in _run(tmp_path, ["show-schedule"]).output


def test_schedule_without_patients_is_refused(tmp_path: Path) -> None:
    result = _run(tmp_path, ["schedule", "--start", "Monday", "--days", "1"])
    assert result.exit_code == 1
    assert "no patients" in result.output


def test_search_and_clear(tmp_path: Path) -> None:
    _seed(tmp_path)
    found = _run(tmp_path, ["search-patients", "--name", "Mi"])
    assert "Mid Mia (patient)" in found.output
    assert "Old Olu" not in found.output

    listing = _run(tmp_path, ["search-patients"]).output
    assert listing.index("Old Olu") < listing.index("Young Yu")

    assert "Dr Blue (doctor)" in _run(tmp_path, ["search-doctors", "--name", "Blue"]).output
    assert "no one matching" in _run(tmp_path, ["search-patients", "--id", "4242"]).output

    cleared = _run(tmp_path, ["clear-patient", "1001"])
    assert "Old Olu has been cleared." in cleared.output
    assert "no one matching" in _run(tmp_path, ["clear-patient", "1001"]).output
    assert [p.name for p in load_register(tmp_path).roster] == ["Mid Mia", "Young Yu"]

    doctor_id = load_register(tmp_path).capacity.doctors[0].doctor_id
    assert "removed from the listing" in _run(tmp_path, ["remove-doctor", str(doctor_id)]).output
    assert [d.name for d in load_register(tmp_path).capacity.doctors] == ["Dr Blue"]


def test_weight_changes_rerank_saved_patients(tmp_path: Path) -> None:
    _seed(tmp_path)
    assert _run(tmp_path, ["set-weight", "Asthma", "--weight", "-200"]).exit_code == 0
    names = [p.name for p in load_register(tmp_path).roster]
    assert names[-1] == "Old Olu"

    assert _run(tmp_path, ["remove-weight", "Asthma"]).exit_code == 0
    assert "Asthma" not in load_register(tmp_path).cfg.attribute_weights
    assert "no weight is set" in _run(tmp_path, ["remove-weight", "Asthma"]).output

    assert _run(tmp_path, ["set-age-weight", "0", "500"]).exit_code == 0
    assert load_register(tmp_path).cfg.age_weights[0] == 500

    settings = _run(tmp_path, ["show-settings"]).output
    assert "Available doses" in settings
    assert "Age in 80s+" in settings


def test_questionnaire_prompts_fill_missing_answers(tmp_path: Path) -> None:
    questionnaire = tmp_path / "Questionnaire.txt"
    questionnaire.write_text("Asthma\nDo you have asthma?\nCOPD\nDo you have COPD?\n", encoding="utf-8")
    qualification = tmp_path / "QualificationQuestionnaire.txt"
    qualification.write_text("NO\nAre you sick today?\n", encoding="utf-8")

    result = _run(
        tmp_path,
        [
            "add-patient", "--name", "Quinn", "--birthdate", "05/05/1960",
            "--answer", "Asthma=yes",
            "--questionnaire", str(questionnaire),
            "--qualification", str(qualification),
        ],
        input="n\ny\n",
    )
    assert result.exit_code == 0, result.output
    patient = load_register(tmp_path).roster[0]
    assert patient.responses == {"Asthma": True, "COPD": True}

    refused = _run(
        tmp_path,
        ["add-patient", "--name", "Sick Sam", "--birthdate", "05/05/1960", "--qualification", str(qualification)],
        input="y\n",
    )
    assert "do not qualify" in refused.output
    assert len(load_register(tmp_path).roster) == 1


def test_bad_input_is_rejected(tmp_path: Path) -> None:
    assert _run(tmp_path, ["add-patient", "--name", "X", "--birthdate", "1990-01-01"]).exit_code == 2
    assert _run(tmp_path, ["add-patient", "--name", "X", "--birthdate", "01/01/1990", "--email", "nope"]).exit_code == 2
    assert _run(tmp_path, ["add-doctor", "--name", "Short", "1", "2"]).exit_code == 2
    assert _run(tmp_path, ["set-doses", "Caturday", "3"]).exit_code == 2
    assert _run(tmp_path, ["set-doses", "Monday", "-1"]).exit_code == 2


def test_reset_clears_everything(tmp_path: Path) -> None:
    _seed(tmp_path)
    assert _run(tmp_path, ["reset"], input="n\n").exit_code == 0
    assert len(load_register(tmp_path).roster) == 3

    assert "Register reset." in _run(tmp_path, ["reset", "--yes"]).output
    register = load_register(tmp_path)
    assert register.roster.is_empty()
    assert not register.has_doctors()
    assert register.cfg.daily_doses == [0] * 7


def test_set_weights_replaces_the_whole_weighting(tmp_path: Path) -> None:
    _seed(tmp_path)
    questionnaire = tmp_path / "Questionnaire.txt"
    questionnaire.write_text("Asthma\nDo you have asthma?\n", encoding="utf-8")

    result = _run(tmp_path, ["set-weights", "--questionnaire", str(questionnaire)], input="-100\n")
    assert result.exit_code == 0, result.output
    register = load_register(tmp_path)
    assert register.cfg.attribute_weights == {"Asthma": -100}
    assert [p.name for p in register.roster] == ["Mid Mia", "Young Yu", "Old Olu"]
    assert register.roster[2].priority_score == 60 - 100


def test_search_by_id_shows_priority_points(tmp_path: Path) -> None:
    _seed(tmp_path)
    output = _run(tmp_path, ["search-patients", "--id", "1001"]).output
    assert "Old Olu (patient)" in output
    assert "Priority points" in output
    assert "Age in 80s+" in output
    assert "Asthma" in output
