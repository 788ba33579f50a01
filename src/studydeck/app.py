"""Interactive CLI application."""
import logging
import random
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from studydeck.clock import system_now
from studydeck.config import Settings, settings
from studydeck.decks import all_deck_stats, create_card, create_deck, delete_card, delete_deck
from studydeck.errors import StudyDeckError
from studydeck.importer import import_cards
from studydeck.models import AGAIN, DEFAULT_DECK_ID, EASY, GOOD, HARD, QUALITY_BUTTONS
from studydeck.session import ReviewSession
from studydeck.stats import get_retention_color, get_retention_label, get_study_stats
from studydeck.store import CardStore, SqliteStore

console = Console()
logger = logging.getLogger(__name__)

EXIT_WORDS = ("q", "menu")

# Only these four qualities are offered; 0 and 2 stay reachable through the API
ANSWER_KEYS = {
    "a": AGAIN, "1": AGAIN,
    "h": HARD, "3": HARD,
    "g": GOOD, "4": GOOD,
    "e": EASY, "5": EASY,
}


class SessionExitRequested(Exception):
    """User typed q/menu in the middle of a review."""


def configure_logging(level: str = "WARNING") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def ask_quality() -> int:
    buttons = "  ".join(f"[cyan]{label[0].lower()}[/cyan]={label}" for label, _ in QUALITY_BUTTONS)
    choice = session_prompt(f"How well did you remember? {buttons}", choices=list(ANSWER_KEYS) + list(EXIT_WORDS))
    return ANSWER_KEYS[choice.strip().lower()]


def show_welcome():
    console.print(Panel(
        "[bold]Student Flashcards[/bold]\n[dim]Spaced repetition study decks[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("study", "Review due cards"),
        ("add", "Add a card"),
        ("cards", "List cards in a deck"),
        ("delete", "Delete a card"),
        ("decks", "Decks and due counts"),
        ("newdeck", "Create a deck"),
        ("deldeck", "Delete a deck and its cards"),
        ("import", "Import cards from a file"),
        ("stats", "Review statistics"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def make_session(store: CardStore, cfg: Settings) -> ReviewSession:
    rng = random.Random(cfg.shuffle_seed) if cfg.shuffle_seed is not None else None
    return ReviewSession(store, clock=system_now, order=cfg.queue_order, rng=rng)


def run_review_session(session: ReviewSession, group_id: str | None = None) -> int:
    """Drive a session from the terminal. Returns how many cards were graded."""
    if not session.start(group_id=group_id):
        console.print("[yellow]No cards to study yet. Add some with 'add'.[/yellow]")
        return 0
    console.print(f"\n[bold]Study Session[/bold] | {session.total} cards [dim](q to stop)[/dim]\n")
    try:
        while session.is_active:
            card = session.current
            console.print(Panel(card.front, title=f"Card {session.position + 1}/{session.total}", border_style="cyan"))
            session_prompt("[dim]Press Enter to reveal answer[/dim]", default="", show_default=False)
            session.reveal()
            console.print(Panel(card.back, border_style="green"))
            updated = session.answer(ask_quality())
            console.print(f"[dim]Next review in {updated.interval} day(s)[/dim]\n")
    except SessionExitRequested:
        session.exit()
        console.print("[dim]Session stopped.[/dim]")
    console.print(f"[green]Reviewed {session.reviewed} card(s).[/green]")
    return session.reviewed


def choose_deck(store: CardStore, allow_all: bool = False) -> str | None:
    decks = store.list_groups()
    for i, d in enumerate(decks, 1):
        console.print(f"  [cyan]{i}[/cyan]) [{d.color}]{d.name}[/{d.color}]")
    choices = [str(i) for i in range(1, len(decks) + 1)]
    if allow_all:
        console.print("  [cyan]all[/cyan]) Every deck")
        choices.append("all")
    choice = Prompt.ask("Deck", choices=choices, default="all" if allow_all else "1")
    if choice == "all":
        return None
    return decks[int(choice) - 1].id


def cmd_study(store: CardStore, cfg: Settings):
    group_id = choose_deck(store, allow_all=True)
    run_review_session(make_session(store, cfg), group_id)


def cmd_add(store: CardStore, cfg: Settings):
    group_id = choose_deck(store)
    front = Prompt.ask("Front")
    back = Prompt.ask("Back")
    create_card(store, front, back, group_id, now=system_now())
    console.print("[green]Card added.[/green]")


def cmd_cards(store: CardStore, cfg: Settings) -> list:
    group_id = choose_deck(store, allow_all=True)
    cards = store.list_items(group_id)
    if not cards:
        console.print("[yellow]No cards here.[/yellow]")
        return cards
    now = system_now()
    table = Table(title="Cards")
    table.add_column("#", justify="right")
    table.add_column("Front", style="cyan")
    table.add_column("Back")
    table.add_column("Next review")
    for i, c in enumerate(cards, 1):
        due = "[green]due[/green]" if c.next_review_at <= now else c.next_review_at.strftime("%Y-%m-%d")
        table.add_row(str(i), c.front, c.back, due)
    console.print(table)
    return cards


def cmd_delete(store: CardStore, cfg: Settings):
    cards = cmd_cards(store, cfg)
    if not cards:
        return
    index = Prompt.ask("Card # to delete", choices=[str(i) for i in range(1, len(cards) + 1)])
    card = cards[int(index) - 1]
    delete_card(store, card.id)
    console.print(f"[green]Deleted '{card.front}'.[/green]")


def cmd_decks(store: CardStore, cfg: Settings):
    table = Table(title="Decks")
    table.add_column("Deck")
    table.add_column("Cards", justify="right")
    table.add_column("Due", justify="right")
    for ds in all_deck_stats(store, system_now()):
        table.add_row(f"[{ds['color']}]{ds['name']}[/{ds['color']}]", str(ds["total"]), str(ds["due"]))
    console.print(table)


def cmd_newdeck(store: CardStore, cfg: Settings):
    deck = create_deck(store, Prompt.ask("Deck name"))
    console.print(f"[green]Created deck [{deck.color}]{deck.name}[/{deck.color}].[/green]")


def cmd_deldeck(store: CardStore, cfg: Settings):
    group_id = choose_deck(store)
    if group_id == DEFAULT_DECK_ID:
        console.print("[red]The General deck cannot be deleted.[/red]")
        return
    if Confirm.ask("Delete this deck and all of its cards?", default=False):
        delete_deck(store, group_id)
        console.print("[green]Deck deleted.[/green]")


def cmd_import(store: CardStore, cfg: Settings):
    file_path = Prompt.ask("File path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    group_id = choose_deck(store)
    result = import_cards(store, file_path, group_id, now=system_now())
    console.print(
        f"[green]Imported {result['imported']} card(s) from {result['filename']}[/green]"
        + (f" [yellow]({result['skipped']} skipped)[/yellow]" if result["skipped"] else "")
    )


def cmd_stats(store: CardStore, cfg: Settings):
    stats = get_study_stats(store, system_now())
    rate = stats["retention"]
    color = get_retention_color(rate)
    bar_filled = int(rate / 5)
    bar = f"[{color}]{'█' * bar_filled}{'░' * (20 - bar_filled)}[/{color}]"
    console.print(Panel("[bold]Review statistics[/bold]", border_style="blue"))
    console.print(f"\n  Retention: [bold]{rate}%[/bold] {bar} [{color}]{get_retention_label(rate)}[/{color}]\n")
    console.print(f"  Cards: [bold]{stats['cards']}[/bold]  |  "
                  f"Due: [bold]{stats['due']}[/bold]  |  "
                  f"Decks: [bold]{stats['decks']}[/bold]  |  "
                  f"Reviews: [bold]{stats['reviews']}[/bold] ({stats['reviewed_today']} today)")


COMMANDS = {
    "study": cmd_study,
    "add": cmd_add,
    "cards": cmd_cards,
    "delete": cmd_delete,
    "decks": cmd_decks,
    "newdeck": cmd_newdeck,
    "deldeck": cmd_deldeck,
    "import": cmd_import,
    "stats": cmd_stats,
}


def main():
    cfg = settings
    configure_logging(cfg.log_level)
    store = SqliteStore(cfg.db_path)

    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="study").strip().lower()
        if choice in ("quit", "exit", "q"):
            console.print("[dim]Happy studying![/dim]")
            break
        command = COMMANDS.get(choice)
        if command is None:
            console.print("[red]Unknown command. Try again.[/red]")
            continue
        try:
            command(store, cfg)
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except StudyDeckError as e:
            console.print(f"[red]{e}[/red]")
        except Exception as e:
            logger.exception("Command %s failed", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
