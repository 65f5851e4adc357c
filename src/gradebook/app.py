"""Interactive CLI application."""
import sys

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from gradebook.backup import BackupFormatError, load_backup
from gradebook.config import DEFAULT_BACKUP_PATH, configure_logging
from gradebook.grades import grade_color
from gradebook.models import AttendanceRisk, Gradebook
from gradebook.report import group_report, group_summary, recovery_candidates

console = Console()

RISK_COLORS = {
    AttendanceRisk.OK: "green",
    AttendanceRisk.AT_RISK: "yellow",
    AttendanceRisk.CRITICAL: "red",
}


def fmt_grade(grade) -> str:
    if grade is None:
        return "-"
    color = grade_color(grade)
    return f"[{color}]{grade:.1f}[/{color}]"


def fmt_pct(pct: float) -> str:
    return f"{pct:.0f}%"


def show_welcome(book: Gradebook):
    s = book.settings
    console.print(Panel(
        f"[bold]Gradebook[/bold]\n[dim]Semester {s.semester_start} to {s.semester_end}"
        f" (first partial ends {s.first_partial_end})[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("groups", "List groups and weight checks"),
        ("report", "Partial averages and final grades"),
        ("recovery", "Students needing remedial/extra/special"),
        ("attendance", "Monthly attendance and evaluation averages"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def select_group(book: Gradebook) -> str | None:
    if not book.groups:
        console.print("[yellow]No groups in this backup.[/yellow]")
        return None
    if len(book.groups) == 1:
        return book.groups[0].id
    for i, g in enumerate(book.groups, 1):
        console.print(f"  [cyan]{i}[/cyan]) {g.name} [dim]{g.subject}[/dim]")
    choice = Prompt.ask("Select group", choices=[str(i) for i in range(1, len(book.groups) + 1)])
    return book.groups[int(choice) - 1].id


def cmd_groups(book: Gradebook):
    table = Table(title="Groups")
    table.add_column("Group", style="cyan")
    table.add_column("Subject")
    table.add_column("Students", justify="right")
    table.add_column("Class days")
    table.add_column("Weights")
    for g in book.groups:
        days = ", ".join(d.name.title()[:3] for d in sorted(g.class_days))
        warnings = group_summary(book, g.id)["weight_warnings"]
        weights = "[red]" + "; ".join(warnings) + "[/red]" if warnings else "[green]OK[/green]"
        table.add_row(g.name, g.subject, str(len(g.students)), days or "-", weights)
    console.print(table)


def cmd_report(book: Gradebook):
    group_id = select_group(book)
    if group_id is None:
        return
    group = book.get_group(group_id)
    table = Table(title=f"{group.name} Grades")
    table.add_column("Student", style="cyan")
    table.add_column("Att P1", justify="right")
    table.add_column("P1", justify="right")
    table.add_column("Att P2", justify="right")
    table.add_column("P2", justify="right")
    table.add_column("Final", justify="right")
    table.add_column("Type")
    table.add_column("Attendance")
    for row in group_report(book, group_id):
        final = row["final"]
        status = final.classification.value
        if final.is_failing:
            status = f"[red]{status} (failing)[/red]"
        risk = row["attendance_risk"]
        risk_color = RISK_COLORS[risk]
        att = f"[{risk_color}]{fmt_pct(row['semester_attendance'])}[/{risk_color}]"
        if row["fails_by_attendance"]:
            att += " [red]FAIL[/red]"
        table.add_row(
            row["name"],
            fmt_pct(row["p1_attendance"]),
            fmt_grade(row["p1_average"]),
            fmt_pct(row["p2_attendance"]),
            fmt_grade(row["p2_average"]),
            fmt_grade(final.score),
            status,
            att,
        )
    console.print(table)


def cmd_recovery(book: Gradebook):
    group_id = select_group(book)
    if group_id is None:
        return
    candidates = recovery_candidates(book, group_id)
    if not candidates:
        console.print("[green]No students need recovery in this group.[/green]")
        return
    table = Table(title="Recovery")
    table.add_column("Student", style="cyan")
    table.add_column("P1", justify="right")
    table.add_column("P2", justify="right")
    table.add_column("Rem P1", justify="right")
    table.add_column("Rem P2", justify="right")
    table.add_column("Extra", justify="right")
    table.add_column("Special", justify="right")
    table.add_column("Final", justify="right")
    table.add_column("Open stages")
    for row in candidates:
        rec = row["recovery"]
        stages = [name.replace("_", " ") for name, ok in row["eligible"].items() if ok]
        table.add_row(
            row["name"],
            fmt_grade(row["p1_average"]),
            fmt_grade(row["p2_average"]),
            fmt_grade(rec.remedial_p1),
            fmt_grade(rec.remedial_p2),
            fmt_grade(rec.extra),
            fmt_grade(rec.special),
            fmt_grade(row["final"].score),
            ", ".join(stages) or "-",
        )
    console.print(table)


def cmd_attendance(book: Gradebook):
    group_id = select_group(book)
    if group_id is None:
        return
    summary = group_summary(book, group_id)
    if not summary["monthly_attendance"]:
        console.print("[yellow]No attendance recorded yet.[/yellow]")
    else:
        table = Table(title="Monthly Attendance")
        table.add_column("Month", style="cyan")
        table.add_column("Average", justify="right")
        for month, pct in summary["monthly_attendance"].items():
            table.add_row(month, fmt_pct(pct))
        console.print(table)
    averages = summary["evaluation_averages"]
    if averages:
        table = Table(title="Evaluation Averages")
        table.add_column("Evaluation", style="cyan")
        table.add_column("Average", justify="right")
        table.add_column("Max", justify="right")
        for info in averages.values():
            table.add_row(info["name"], f"{info['average']:.1f}", f"{info['max_score']:g}")
        console.print(table)


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    configure_logging()
    backup_path = argv[0] if argv else DEFAULT_BACKUP_PATH
    try:
        book = load_backup(backup_path)
    except BackupFormatError as e:
        console.print(f"[red]{e}[/red]")
        return 1

    show_welcome(book)

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="report").strip().lower()
        try:
            if choice == "groups":
                cmd_groups(book)
            elif choice == "report":
                cmd_report(book)
            elif choice == "recovery":
                cmd_recovery(book)
            elif choice == "attendance":
                cmd_attendance(book)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Bye.[/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
