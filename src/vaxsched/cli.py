from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, TypeVar, Union

import typer
from rich.console import Console
from rich.table import Table

from .config import AGE_BUCKETS, DAY_NAMES, DAYS_PER_WEEK
from .forms import (
    is_qualified,
    load_qualification,
    load_questionnaire,
    parse_date,
    parse_weekday,
    parse_yes_no,
    probable_email,
    probable_phone,
)
from .logger import configure_logging, get_logger
from .models import Doctor, Patient
from .persistence import DEFAULT_DATA_DIR, has_saved_state, load_register, save_register
from .register import Register
from .scheduling import CannotScheduleError, plan_to_df
from .scoring import age_label, score_breakdown
from .visualize import plot_schedule

console = Console()
log = get_logger(__name__)
T = TypeVar("T")

app = typer.Typer(add_completion=False, no_args_is_help=True, help="Vaccine dose scheduler.")


@dataclass
class State:
    data_dir: Path = DEFAULT_DATA_DIR

    def load(self) -> Register:
        if has_saved_state(self.data_dir):
            return load_register(self.data_dir)
        log.info("No saved register under %s, starting fresh", self.data_dir)
        return Register()

    def save(self, register: Register) -> None:
        save_register(register, self.data_dir)


def _as(parser: Callable[[str], T]) -> Callable[[Optional[str]], Optional[T]]:
    def callback(value: Optional[str]) -> Optional[T]:
        if value is None:
            return None
        try:
            return parser(value)
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from exc

    return callback


@app.callback()
def root(
    ctx: typer.Context,
    data_dir: Path = typer.Option(DEFAULT_DATA_DIR, help="Directory holding the saved register."),
    log_level: str = typer.Option("WARNING", help="Logging level."),
) -> None:
    configure_logging(log_level)
    ctx.obj = State(data_dir=data_dir)


@app.command("show-settings")
def show_settings(ctx: typer.Context) -> None:
    """Display available doses and the questionnaire weighting."""
    register = ctx.obj.load()
    serviceable = register.capacity.serviceable_by_day()

    doses = Table(title="Available doses", show_header=True, header_style="bold magenta")
    doses.add_column("Day")
    doses.add_column("Doses")
    doses.add_column("Serviceable")
    for day in range(DAYS_PER_WEEK):
        doses.add_row(DAY_NAMES[day], str(register.cfg.doses_for(day)), str(int(serviceable[day])))
    console.print(doses)

    weights = Table(title="Weighting", show_header=True, header_style="bold magenta")
    weights.add_column("Criterion")
    weights.add_column("Points")
    for bucket in range(AGE_BUCKETS):
        weights.add_row(age_label(bucket), str(register.cfg.age_weight(bucket)))
    for key in sorted(register.cfg.attribute_weights):
        weights.add_row(key, f"{register.cfg.attribute_weights[key]} for yes")
    console.print(weights)


@app.command("set-doses")
def set_doses(
    ctx: typer.Context,
    weekday: str = typer.Argument(..., help="Day of the week, e.g. Monday."),
    doses: int = typer.Argument(..., min=0, help="Doses available on that day."),
) -> None:
    """Set how many doses can be given on a day of the week."""
    day = _as(parse_weekday)(weekday)
    register = ctx.obj.load()
    register.set_daily_doses(day, doses)
    ctx.obj.save(register)
    console.log(f"{DAY_NAMES[day]}: {doses} doses")


@app.command("set-age-weight")
def set_age_weight(
    ctx: typer.Context,
    decade: int = typer.Argument(..., min=0, max=AGE_BUCKETS - 1, help="Age decade, 8 meaning 80 and over."),
    points: int = typer.Argument(..., min=0, help="Priority points for the decade."),
) -> None:
    """Set the points for an age decade and re-rank every patient."""
    register = ctx.obj.load()
    register.set_age_weight(decade, points)
    ctx.obj.save(register)
    console.log(f"Age decade {decade}: {points} points; patients re-ranked")


@app.command("set-weight")
def set_weight(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Questionnaire response key."),
    weight: int = typer.Option(..., "--weight", help="Points added on a yes answer (negative subtracts)."),
) -> None:
    """Set the weight of a questionnaire response and re-rank every patient."""
    register = ctx.obj.load()
    register.set_attribute_weight(key, weight)
    ctx.obj.save(register)
    console.log(f"{key}: {weight} for yes; patients re-ranked")


@app.command("remove-weight")
def remove_weight(ctx: typer.Context, key: str = typer.Argument(...)) -> None:
    """Stop weighting a questionnaire response."""
    register = ctx.obj.load()
    if not register.remove_attribute_weight(key):
        console.print(f"Sorry, no weight is set for {key!r}.")
        return
    ctx.obj.save(register)
    console.log(f"{key} removed; patients re-ranked")


@app.command("set-weights")
def set_weights(
    ctx: typer.Context,
    questionnaire: Path = typer.Option(..., exists=True, dir_okay=False, help="Questionnaire file listing the keys."),
) -> None:
    """Weight every questionnaire key afresh; keys not in the file stop counting."""
    weights: Dict[str, int] = {}
    for question in load_questionnaire(questionnaire):
        weights[question.key] = typer.prompt(f"Points for a yes to {question.key!r}", type=int)
    register = ctx.obj.load()
    register.replace_attribute_weights(weights)
    ctx.obj.save(register)
    console.log(f"{len(weights)} weights set; patients re-ranked")


def _collect_answers(answers: List[str], questionnaire: Optional[Path]) -> Dict[str, bool]:
    responses: Dict[str, bool] = {}
    for item in answers:
        key, sep, value = item.rpartition("=")
        if not sep or not key:
            raise typer.BadParameter(f"{item!r} must look like KEY=yes", param_hint="--answer")
        responses[key] = _as(parse_yes_no)(value)
    if questionnaire is not None:
        for question in load_questionnaire(questionnaire):
            if question.key not in responses:
                responses[question.key] = typer.confirm(question.prompt)
    return responses


@app.command("add-patient")
def add_patient(
    ctx: typer.Context,
    name: str = typer.Option(..., help="Patient name."),
    birthdate: date = typer.Option(..., parser=_as(parse_date), help="Birthdate, MM/DD/YYYY."),
    phone: str = typer.Option("N/A", callback=_as(probable_phone)),
    email: str = typer.Option("N/A", callback=_as(probable_email)),
    answer: List[str] = typer.Option([], help="Questionnaire response as KEY=yes|no; repeatable."),
    questionnaire: Optional[Path] = typer.Option(None, help="Questionnaire file to prompt unanswered keys from."),
    qualification: Optional[Path] = typer.Option(None, help="Qualification questionnaire to screen with."),
) -> None:
    """Register a patient; their priority is scored on entry."""
    if qualification is not None:
        questions = load_qualification(qualification)
        replies = [typer.confirm(q.prompt) for q in questions]
        if not is_qualified(questions, replies):
            console.print("Sorry, this means you do not qualify for vaccination at this moment. Thank you.")
            return

    patient = Patient(
        name=name,
        phone=phone,
        email=email,
        birthdate=birthdate,
        responses=_collect_answers(answer, questionnaire),
    )
    register = ctx.obj.load()
    register.add_patient(patient)
    ctx.obj.save(register)
    console.print(f"You have been added to the register.\nYour patient ID number is {patient.patient_id}.")


@app.command("add-doctor")
def add_doctor(
    ctx: typer.Context,
    doses: List[int] = typer.Argument(..., help="Doses the doctor can give, Sunday through Saturday."),
    name: str = typer.Option(..., help="Doctor name."),
    phone: str = typer.Option("N/A", callback=_as(probable_phone)),
    email: str = typer.Option("N/A", callback=_as(probable_email)),
) -> None:
    """Register a doctor with a dose capacity for each day of the week."""
    if len(doses) != DAYS_PER_WEEK or any(d < 0 for d in doses):
        raise typer.BadParameter("give seven non-negative counts, Sunday through Saturday", param_hint="DOSES")
    register = ctx.obj.load()
    doctor = register.add_doctor(Doctor(name=name, phone=phone, email=email, doses_per_day=list(doses)))
    ctx.obj.save(register)
    console.print(f"You have been added to the register.\nYour doctor ID number is {doctor.doctor_id}.")


def _print_people(people: Sequence[Union[Patient, Doctor]]) -> None:
    if not people:
        console.print("Sorry, no one matching that was found.")
        return
    console.print("Results:")
    for person in people:
        console.print(str(person), highlight=False, markup=False, soft_wrap=True)


@app.command("search-patients")
def search_patients(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, help="Substring of the name."),
    patient_id: Optional[int] = typer.Option(None, "--id", help="Patient ID."),
) -> None:
    """Find patients by name or ID; list everyone in priority order otherwise."""
    register = ctx.obj.load()
    if patient_id is not None:
        found = register.find_patient(patient_id)
        _print_people([found] if found else [])
        if found:
            breakdown = Table(title="Priority points", show_header=True, header_style="bold magenta")
            breakdown.add_column("Criterion")
            breakdown.add_column("Points")
            for label, points in score_breakdown(found, register.cfg):
                breakdown.add_row(label, str(points))
            console.print(breakdown)
    elif name is not None:
        _print_people(register.find_patients(name))
    else:
        _print_people(register.roster.patients())


@app.command("search-doctors")
def search_doctors(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, help="Substring of the name."),
    doctor_id: Optional[int] = typer.Option(None, "--id", help="Doctor ID."),
) -> None:
    """Find doctors by name or ID; list everyone otherwise."""
    register = ctx.obj.load()
    if doctor_id is not None:
        found = register.find_doctor(doctor_id)
        _print_people([found] if found else [])
    elif name is not None:
        _print_people(register.find_doctors(name))
    else:
        _print_people(list(register.capacity.doctors))


@app.command("clear-patient")
def clear_patient(ctx: typer.Context, patient_id: int = typer.Argument(...)) -> None:
    """Remove a patient from the register."""
    register = ctx.obj.load()
    patient = register.remove_patient(patient_id)
    if patient is None:
        console.print("Sorry, no one matching that id was found.")
        return
    ctx.obj.save(register)
    console.print(f"{patient.name} has been cleared.")


@app.command("remove-doctor")
def remove_doctor(ctx: typer.Context, doctor_id: int = typer.Argument(...)) -> None:
    """Remove a doctor from the register."""
    register = ctx.obj.load()
    doctor = register.remove_doctor(doctor_id)
    if doctor is None:
        console.print("Sorry, no one matching that id was found.")
        return
    ctx.obj.save(register)
    console.print(f"{doctor.name} has been removed from the listing.")


@app.command("schedule")
def schedule(
    ctx: typer.Context,
    start: str = typer.Option(..., help="Day of the week to start from."),
    days: int = typer.Option(..., min=1, help="Number of active days to schedule."),
    csv_out: Optional[Path] = typer.Option(None, help="Path to save the assignment table."),
    png_out: Optional[Path] = typer.Option(None, help="Path to save a plot of the schedule."),
) -> None:
    """Generate, save and print a schedule."""
    start_day = _as(parse_weekday)(start)
    register = ctx.obj.load()
    if not register.has_patients():
        console.print("Sorry, there are no patients in the system.")
        raise typer.Exit(code=1)
    try:
        plan = register.plan_schedule(start_day, days)
    except CannotScheduleError as exc:
        console.print(f"[bold red]Cannot schedule:[/] {exc}")
        raise typer.Exit(code=1)
    ctx.obj.save(register)

    console.print(plan.report, highlight=False, markup=False, soft_wrap=True)
    if plan.unassigned:
        console.log(f"{len(plan.unassigned)} patients left for a later schedule")
    if csv_out or png_out:
        df = plan_to_df(plan)
        if csv_out:
            df.to_csv(csv_out, index=False)
            console.log(f"Saved assignments to {csv_out}")
        if png_out:
            plot_schedule(df, outfile=png_out)
            console.log(f"Saved plot to {png_out}")


@app.command("show-schedule")
def show_schedule(ctx: typer.Context) -> None:
    """Print the last generated schedule."""
    console.print(ctx.obj.load().current_schedule, highlight=False, markup=False, soft_wrap=True)


@app.command("reset")
def reset(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", help="Skip the confirmation."),
) -> None:
    """Reset listings, weighting and scheduling."""
    if not yes and not typer.confirm("Reset the entire register (listings, weighting system, and scheduling)?"):
        return
    register = ctx.obj.load()
    register.reset()
    ctx.obj.save(register)
    console.print("Register reset.")
