from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import List, Optional, Tuple

import pandas as pd
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from .cabinet import MedicineCabinet
from .config import WEEKDAYS, EngineConfig
from .errors import InvalidFormat, MedschedError, NotFound
from .models import Adjustment, Reminder, Schedule
from .registry import SlotRegistry
from .scanner import ReminderScanner
from .scheduling import ScheduleBuilder
from .timeslot import normalize_day, normalize_time, parse_time

console = Console()
app = typer.Typer(add_completion=False, no_args_is_help=True)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _print_adjustment(adj: Adjustment) -> None:
    console.print(f"[yellow]Conflict on {adj.day} at {adj.original}. Adjusted to: {adj.adjusted}[/]")


def _print_reminder(reminder: Reminder) -> None:
    console.print(f"[bold cyan]{reminder.message}[/]")


def _print_schedule(title: str, schedule: Schedule) -> None:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Dose")
    table.add_column("Time")
    table.add_column("Days")
    for idx, time in enumerate(schedule.dose_times, start=1):
        table.add_row(str(idx), time, ", ".join(schedule.days))
    console.print(table)


def _print_frame(title: str, df: pd.DataFrame) -> None:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    for col in df.columns:
        table.add_column(str(col))
    for row in df.itertuples(index=False):
        table.add_row(*(str(v) for v in row))
    console.print(table)


def _parse_taken(values: List[str]) -> List[Tuple[str, str]]:
    taken = []
    for raw in values:
        day, sep, time = raw.rpartition("-")
        if not sep or not day.strip():
            raise typer.BadParameter(f"Expected DAY-HH:mm, got {raw!r}", param_hint="--taken")
        taken.append((day, time))
    return taken


def _moment_for(day: str, time: str, today: Optional[date] = None) -> datetime:
    """Next date (from ``today``) falling on ``day`` at ``time``."""
    day = normalize_day(day)
    if day not in WEEKDAYS:
        raise typer.BadParameter(f"{day!r} is not a weekday name", param_hint="--on")
    hour, minute = parse_time(time)
    today = today or date.today()
    offset = (WEEKDAYS.index(day) - today.weekday()) % 7
    target = today + timedelta(days=offset)
    return datetime(target.year, target.month, target.day, hour, minute)


@app.command("plan")
def plan(
    doses: int = typer.Option(..., help="Number of doses per day."),
    day: List[str] = typer.Option(..., help="Day to take the medicine on (repeatable)."),
    time: List[str] = typer.Option(..., help="Requested time for each dose, HH:mm (repeatable)."),
    taken: List[str] = typer.Option([], help="Slot already claimed by another dose, e.g. Monday-09:00."),
    csv_out: Optional[Path] = typer.Option(None, help="Path to save the committed slot table."),
    log_level: str = typer.Option("WARNING", help="Logging level."),
) -> None:
    """Resolve one schedule against a set of already claimed slots."""
    _configure_logging(log_level)
    cfg = EngineConfig()
    try:
        registry = SlotRegistry(cfg, taken=_parse_taken(taken))
        builder = ScheduleBuilder(registry, cfg, on_adjust=_print_adjustment)
        schedule = builder.build(doses, day, time)
    except (MedschedError, ValueError) as exc:
        console.print(str(exc), style="red")
        raise typer.Exit(code=1)

    _print_schedule("Committed schedule", schedule)
    if csv_out:
        df = pd.DataFrame.from_records(
            [{"day": d, "time": t} for d, t in schedule.slots()], columns=["day", "time"]
        )
        df.to_csv(csv_out, index=False)
        console.log(f"Saved schedule to {csv_out}")


@app.command("check")
def check(
    doses: int = typer.Option(..., help="Number of doses per day."),
    day: List[str] = typer.Option(..., help="Day to take the medicine on (repeatable)."),
    time: List[str] = typer.Option(..., help="Requested time for each dose, HH:mm (repeatable)."),
    on: str = typer.Option(..., help="Weekday to simulate the clock on."),
    at: str = typer.Option(..., help="Clock time to simulate, HH:mm."),
    name: str = typer.Option("medicine", help="Medicine name."),
    log_level: str = typer.Option("WARNING", help="Logging level."),
) -> None:
    """Run a single reminder scan at a simulated moment."""
    _configure_logging(log_level)
    cabinet = MedicineCabinet()
    try:
        cabinet.add(name, doses, day, time, on_adjust=_print_adjustment)
        moment = _moment_for(on, at)
    except (MedschedError, ValueError) as exc:
        console.print(str(exc), style="red")
        raise typer.Exit(code=1)

    scanner = ReminderScanner(cabinet.store)
    scanner.subscribe(_print_reminder)
    if not scanner.tick(now=moment):
        console.print(f"[dim]No doses due on {normalize_day(on)} at {normalize_time(at)}.[/]")


@app.command("run")
def run(
    tick_seconds: float = typer.Option(60.0, help="Seconds between reminder scans."),
    log_level: str = typer.Option("WARNING", help="Logging level."),
) -> None:
    """Interactive medicine manager with background dose reminders."""
    _configure_logging(log_level)
    cfg = EngineConfig(tick_seconds=tick_seconds)
    cabinet = MedicineCabinet(cfg, on_adjust=_print_adjustment)
    scanner = ReminderScanner(cabinet.store, cfg)
    scanner.subscribe(_print_reminder)

    console.print("[bold]Welcome to the Medicine Management System[/]")
    console.print("You can manage your medicines, view schedules, and track history.")
    scanner.start()
    try:
        Menu(cabinet).loop()
    finally:
        scanner.stop()


class Menu:
    CHOICES = [
        "add medicines",
        "view medicines",
        "update medicines",
        "delete medicines",
        "view medicine history",
        "update schedule for an existing medicine",
        "view the schedule of a medicine",
        "exit the system",
    ]

    def __init__(self, cabinet: MedicineCabinet):
        self.cabinet = cabinet
        self.actions = {
            1: self.add_medicines,
            2: self.view_medicines,
            3: self.update_medicines,
            4: self.delete_medicine,
            5: self.view_history,
            6: self.update_schedule,
            7: self.view_schedule,
        }

    def loop(self) -> None:
        while True:
            for idx, label in enumerate(self.CHOICES, start=1):
                console.print(f"[yellow]Enter {idx} to {label}[/]")
            choice = IntPrompt.ask("[blue]Your choice[/]", console=console)
            if choice == len(self.CHOICES):
                console.print("[green]Exiting the system. Goodbye![/]")
                return
            action = self.actions.get(choice)
            if action is None:
                console.print("[red]Invalid choice. Please try again.[/]")
                continue
            try:
                action()
            except MedschedError as exc:
                console.print(str(exc), style="red")

    def _ask_name(self, prompt: str) -> str:
        while True:
            name = Prompt.ask(prompt, console=console, default="", show_default=False).strip().lower()
            if name:
                return name
            console.print("[red]Medicine name cannot be empty. Please try again.[/]")

    def _ask_positive(self, prompt: str) -> int:
        while True:
            value = IntPrompt.ask(prompt, console=console)
            if value > 0:
                return value
            console.print("[red]Value must be positive.[/]")

    def _ask_schedule(self) -> Tuple[int, List[str], List[str]]:
        doses = self._ask_positive("Enter number of doses per day")
        day_count = self._ask_positive("Enter number of days to take the medicine")
        days = []
        while len(days) < day_count:
            day = Prompt.ask(f"Enter day {len(days) + 1} (e.g., Monday)", console=console, default="", show_default=False)
            if not day.strip():
                console.print("[red]Day cannot be empty. Please try again.[/]")
                continue
            days.append(day.strip())
        times = []
        while len(times) < doses:
            raw = Prompt.ask(f"Enter time for dose {len(times) + 1} (HH:mm)", console=console)
            try:
                times.append(normalize_time(raw))
            except InvalidFormat as exc:
                console.print(str(exc), style="red")
        return doses, days, times

    def add_medicines(self) -> None:
        count = self._ask_positive("Enter the number of medicines to add")
        for idx in range(1, count + 1):
            name = self._ask_name(f"Medicine {idx}")
            while name in self.cabinet.medicines():
                console.print(f"[magenta]Medicine {name} is already in the list.[/]")
                if Confirm.ask("Do you want to skip adding this medicine?", console=console):
                    name = ""
                    break
                name = self._ask_name("Enter the name of another medicine")
            if not name:
                continue
            console.print(f"[cyan]Enter schedule details for {name}:[/]")
            self.cabinet.add(name, *self._ask_schedule())
            console.print(f"[green]Medicine {name} added successfully with its schedule.[/]")

    def view_medicines(self) -> None:
        medicines = self.cabinet.medicines()
        if not medicines:
            console.print("[red]No medicines available to view.[/]")
            return
        console.print("[cyan]List of Medicines:[/]")
        fmt = self.cabinet.cfg.timestamp_format
        for record in self.cabinet.records():
            console.print(f"[blue]- {record.name}[/] [dim](added {record.added_at.strftime(fmt)})[/]")

    def update_medicines(self) -> None:
        action = IntPrompt.ask(
            "Choose 1 for 'Remove and Add' or 2 for 'Edit while keeping others'", console=console, choices=["1", "2"]
        )
        if action == 2:
            self.add_medicines()
            return
        while True:
            old = self._ask_name("Enter the name of the medicine to remove")
            if old not in self.cabinet.medicines():
                console.print("[green]No matching medicine found.[/]")
                return
            new = self._ask_name("Enter the new name for the medicine")
            console.print(f"[cyan]Enter schedule details for {new}:[/]")
            self.cabinet.rename(old, new, *self._ask_schedule())
            console.print(f"[green]Medicine updated successfully from {old} to {new}.[/]")
            if not Confirm.ask("Do you want to update another medicine?", console=console):
                return

    def delete_medicine(self) -> None:
        name = self._ask_name("Enter the name of the medicine to delete")
        self.cabinet.delete(name)
        console.print(f"[green]Medicine {name} deleted successfully.[/]")

    def view_history(self) -> None:
        df = self.cabinet.history.to_frame()
        if df.empty:
            console.print("[red]No medicine history available.[/]")
            return
        _print_frame("Medicine History", df)
        self.view_medicines()

    def update_schedule(self) -> None:
        name = self._ask_name("Enter the name of the medicine to update schedule")
        if name not in self.cabinet.medicines():
            raise NotFound(name)
        console.print(f"[cyan]Enter new schedule details for {name}:[/]")
        self.cabinet.update_schedule(name, *self._ask_schedule())
        console.print(f"[green]Schedule for {name} updated successfully.[/]")

    def view_schedule(self) -> None:
        name = self._ask_name("Enter the name of the medicine to view schedule")
        _print_schedule(f"Schedule for {name}", self.cabinet.schedule_for(name))
