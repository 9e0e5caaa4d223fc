"""Interactive CLI application."""
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from prost_reader.catalog import get_exams, get_passages
from prost_reader.dashboard import build_dashboard, get_score_color, get_score_label, get_study_stats
from prost_reader.db import DEFAULT_DB_PATH, get_setting, init_db
from prost_reader.filters import (
    CompletionFilter, PassageFilters, SortOption, all_tags, apply_filters, load_filters, save_filters,
)
from prost_reader.loader import ContentError
from prost_reader.models import LEVELS
from prost_reader.quiz import grade_exam
from prost_reader.seed import DEMO_USER_ID, is_seeded, seed_all
from prost_reader.tracker import compare_with_previous, get_completion_info, record_completion
from prost_reader.vocabulary import add_word, get_user_words, search_words, toggle_favorite

console = Console()

EXIT_WORDS = ("q", "menu")


class SessionExitRequested(Exception):
    """Raised when the user leaves a reading session early."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_int_prompt(prompt: str, choices: list) -> int:
    return int(session_prompt(prompt, choices=list(choices) + list(EXIT_WORDS), show_choices=False))


def get_current_user_id(db_path: str) -> str:
    return get_setting(db_path, "current_user_id", DEMO_USER_ID)


def show_welcome():
    console.print(Panel(
        "[bold]Prost![/bold]\n[dim]German reading practice (Goethe A1 and leveled passages)[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("dashboard", "Progress by level"),
        ("passages", "Browse and filter passages"),
        ("read", "Read a passage and answer questions"),
        ("exam", "Goethe A1 reading exam (3 parts)"),
        ("words", "Your vocabulary list"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def ask_question(question, label: str) -> str:
    console.print(f"[bold]{label}[/bold] {question.prompt}")
    for i, option in enumerate(question.options, 1):
        extra = f" [dim]{option.value}[/dim]" if option.value and option.value != option.text else ""
        console.print(f"  [cyan]{i})[/cyan] {option.text}{extra}")
    choice = session_int_prompt("Your answer", choices=[str(i) for i in range(1, len(question.options) + 1)])
    return question.options[choice - 1].id


def offer_word_saving(db_path: str, user_id: str, passage) -> int:
    saved = 0
    while True:
        word = Prompt.ask("[dim]Save a word from this text (Enter to skip)[/dim]", default="").strip()
        if not word:
            return saved
        if add_word(db_path, user_id, word, context=passage.text, passage=passage):
            console.print(f"[green]Saved '{word}'[/green]")
            saved += 1
        else:
            console.print(f"[yellow]'{word}' is already in your list[/yellow]")


def run_passage_session(db_path: str, user_id: str, passage) -> tuple:
    console.print(Panel(passage.text, title=f"{passage.title} ({passage.level})", border_style="cyan"))
    answers = {}
    for i, question in enumerate(passage.questions, 1):
        answers[question.id] = ask_question(question, f"Q{i}.")
        console.print()
    completion, progress = record_completion(db_path, user_id, passage, answers)
    for i, question in enumerate(passage.questions, 1):
        if question.is_correct(answers[question.id]):
            console.print(f"  [green]Q{i} correct[/green]")
        else:
            console.print(f"  [red]Q{i} incorrect.[/red] Answer: [green]{question.correct_option.text}[/green]")
    comparison = compare_with_previous(db_path, user_id, passage.id, completion.score, exclude_id=completion.id)
    color = get_score_color(completion.score_percentage)
    console.print(f"\n[bold]Score: [{color}]{completion.score_percentage}%[/{color}][/bold]  {comparison.message}")
    console.print(f"[dim]Level {progress.level}: {progress.total_attempts} attempts, "
                  f"average {progress.average_score_percentage}%[/dim]\n")
    offer_word_saving(db_path, user_id, passage)
    return completion, progress


def show_incorrect_answers(result) -> None:
    wrong = [r for p in result.part_results for r in p.question_results if not r.is_correct]
    console.print("\n[bold]Review Incorrect Answers[/bold]")
    for r in wrong:
        console.print(f"[bold]{r.question.number}.[/bold] {r.question.prompt}")
        console.print(f"  Your answer: [red]{r.selected_option_text or '-'}[/red]")
        console.print(f"  Correct answer: [green]{r.correct_option_text}[/green]")
        if r.question.explanation:
            console.print(f"  [dim]{r.question.explanation}[/dim]")


def run_exam_session(db_path: str, user_id: str, exam) -> tuple:
    console.print(Panel(
        f"{exam.total_questions} questions in {len(exam.parts)} parts, {exam.duration_minutes} minutes",
        title=exam.title, border_style="blue",
    ))
    answers = {}
    for part in exam.parts:
        console.print(Panel(part.instructions, title=f"{part.title} ({part.question_range})", border_style="cyan"))
        if part.text_type != "situation_based":
            for text in part.texts:
                console.print(Panel(text.content, title=text.title, border_style="dim"))
        for question in part.questions:
            answers[question.id] = ask_question(question, f"{question.number}.")
            console.print()
    completion, progress = record_completion(db_path, user_id, exam, answers)
    table = Table(title="Results")
    table.add_column("Part")
    table.add_column("Score", justify="right")
    for part_number, score in sorted(completion.part_scores.items()):
        table.add_row(f"Part {part_number}", f"{int(score * 100)}%")
    table.add_row("[bold]Overall[/bold]", f"[bold]{completion.score_percentage}%[/bold]")
    console.print(table)
    if completion.is_passed:
        console.print("[green]Passed![/green]")
    else:
        console.print("[red]Not passed yet.[/red] You need 60%.")
    if completion.is_perfect:
        console.print("[bold green]Perfect Score![/bold green] Every answer was correct.")
    else:
        show_incorrect_answers(grade_exam(exam, answers))
    comparison = compare_with_previous(db_path, user_id, exam.id, completion.score, exclude_id=completion.id)
    console.print(comparison.message)
    return completion, progress


def choose_filters(db_path: str, passages) -> PassageFilters:
    current = load_filters(db_path)
    search = Prompt.ask("Search titles", default=current.search_text)
    tags = all_tags(passages)
    if tags:
        console.print(f"[dim]Tags: {', '.join(tags)}[/dim]")
    tag_text = Prompt.ask("Tags (comma separated)", default=",".join(sorted(current.selected_tags)))
    completion = Prompt.ask(
        "Show", choices=[c.name.lower() for c in CompletionFilter], default=current.completion_filter.name.lower(),
    )
    sort = Prompt.ask(
        "Sort by", choices=[s.name.lower() for s in SortOption], default=current.sort_option.name.lower(),
    )
    filters = PassageFilters(
        search_text=search.strip(),
        selected_tags=frozenset(t.strip() for t in tag_text.split(",") if t.strip()),
        completion_filter=CompletionFilter[completion.upper()],
        sort_option=SortOption[sort.upper()],
    )
    save_filters(db_path, filters)
    return filters


def show_passage_table(passages, info: dict) -> None:
    table = Table(title="Passages")
    table.add_column("#", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Level")
    table.add_column("Best", justify="right")
    table.add_column("Attempts", justify="right")
    for i, p in enumerate(passages, 1):
        entry = info.get(p.id)
        best = f"{int(entry.best_score * 100)}%" if entry else "-"
        table.add_row(str(i), p.title, p.level, best, str(entry.attempt_count) if entry else "0")
    console.print(table)


def filtered_passages(db_path: str, user_id: str, level: str, refine: bool) -> list:
    passages = get_passages(db_path, level=level)
    filters = choose_filters(db_path, passages) if refine else load_filters(db_path)
    info = get_completion_info(db_path, user_id, kind="passage")
    result = apply_filters(passages, filters, info)
    show_passage_table(result, info)
    return result


def cmd_passages(db_path: str):
    user_id = get_current_user_id(db_path)
    level = Prompt.ask("Level", choices=list(LEVELS), default="A2")
    passages = filtered_passages(db_path, user_id, level, refine=True)
    if not passages:
        console.print("[yellow]No passages match these filters.[/yellow]")


def cmd_read(db_path: str):
    user_id = get_current_user_id(db_path)
    level = Prompt.ask("Level", choices=list(LEVELS), default="A1")
    passages = filtered_passages(db_path, user_id, level, refine=False)
    if not passages:
        console.print("[yellow]No passages available for this level.[/yellow]")
        return
    index = int(Prompt.ask("Passage number", choices=[str(i) for i in range(1, len(passages) + 1)]))
    run_passage_session(db_path, user_id, passages[index - 1])


def cmd_exam(db_path: str):
    user_id = get_current_user_id(db_path)
    exams = get_exams(db_path)
    if not exams:
        console.print("[yellow]No exams available.[/yellow]")
        return
    for i, exam in enumerate(exams, 1):
        console.print(f"  [cyan]{i}[/cyan]) {exam.title}")
    index = int(Prompt.ask("Exam", choices=[str(i) for i in range(1, len(exams) + 1)], default="1"))
    run_exam_session(db_path, user_id, exams[index - 1])


def cmd_dashboard(db_path: str):
    user_id = get_current_user_id(db_path)
    table = Table(title="Reading Progress")
    table.add_column("Card", style="cyan")
    table.add_column("Status")
    table.add_column("Done", justify="right")
    table.add_column("Latest", justify="right")
    table.add_column("Best", justify="right")
    table.add_column("Average", justify="right")
    for entry in build_dashboard(db_path, user_id):
        p = entry.progress
        if p.total_attempts:
            color = get_score_color(p.average_score_percentage)
            average = f"[{color}]{p.average_score_percentage}% {get_score_label(p.average_score_percentage)}[/{color}]"
            latest, best = f"{p.latest_score_percentage}%", f"{p.best_score_percentage}%"
        else:
            average = latest = best = "-"
        table.add_row(entry.title, entry.status, str(p.completed_count), latest, best, average)
        if p.part_average_scores:
            parts = "  ".join(f"Part {n}: {int(s * 100)}%" for n, s in p.part_average_scores.items())
            table.add_row("", f"[dim]{parts}[/dim]", "", "", "", "")
    console.print(table)
    stats = get_study_stats(db_path, user_id)
    console.print(f"\n  Passages: [bold]{stats['passages_completed']}[/bold]  |  "
                  f"Exams: [bold]{stats['exams_taken']}[/bold]  |  "
                  f"Attempts: [bold]{stats['total_attempts']}[/bold]  |  "
                  f"Avg: [bold]{stats['avg_score']}%[/bold]  |  "
                  f"Words: [bold]{stats['words_saved']}[/bold]")


def cmd_words(db_path: str):
    user_id = get_current_user_id(db_path)
    query = Prompt.ask("Search (Enter for all)", default="")
    words = search_words(db_path, user_id, query) if query else get_user_words(db_path, user_id)
    if not words:
        console.print("[yellow]No saved words yet. Save words after reading a passage.[/yellow]")
        return
    table = Table(title="Vocabulary")
    table.add_column("#", justify="right")
    table.add_column("Word", style="cyan")
    table.add_column("Level")
    table.add_column("From")
    table.add_column("Notes")
    for i, w in enumerate(words, 1):
        star = "[yellow]*[/yellow] " if w.is_favorite else ""
        table.add_row(str(i), star + w.word, w.level, w.source_passage_title, w.notes or "")
    console.print(table)
    pick = Prompt.ask("Toggle favorite for # (Enter to skip)", default="")
    if pick.isdigit() and 1 <= int(pick) <= len(words):
        toggle_favorite(db_path, words[int(pick) - 1].id)


def setup_logging(level: int = logging.WARNING) -> None:
    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def main():
    setup_logging()
    db_path = DEFAULT_DB_PATH
    init_db(db_path)
    first_run = not is_seeded(db_path)
    if first_run:
        console.print("[dim]Setting up for first use...[/dim]")
    try:
        seed_all(db_path)
    except ContentError as e:
        console.print(f"[red]{e}[/red]\n[dim]Fix the content files and start again.[/dim]")
        return
    if first_run:
        console.print("[green]Ready![/green]\n")

    show_welcome()

    commands = {
        "dashboard": cmd_dashboard,
        "passages": cmd_passages,
        "read": cmd_read,
        "exam": cmd_exam,
        "words": cmd_words,
    }
    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="dashboard").strip().lower()
        try:
            if choice in commands:
                commands[choice](db_path)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Tschüss![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except SessionExitRequested:
            console.print("[dim]Session left. Nothing was recorded.[/dim]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except ContentError as e:
            console.print(f"[red]{e}[/red] [dim]Try the command again.[/dim]")


if __name__ == "__main__":
    main()
