"""Rich terminal rendering for realm-roster."""
from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from realm_roster.mechanics.filter_engine import names_match, rating_for
from realm_roster.mechanics.grades import format_rating
from realm_roster.mechanics.trait_filters import comparison_label, serialize_filter
from realm_roster.models.character import CharacterListItem
from realm_roster.models.filters import FilterResult, TraitFilter
from realm_roster.models.migration import MigrationResult
from realm_roster.models.trait import DisplayMode

console = Console()


class Display:
    def __init__(self, show_grades: bool = True, console_: Console | None = None):
        self.console = console_ or console
        self.show_grades = show_grades

    def _cell(self, character: CharacterListItem, trait_name: str) -> str:
        value = rating_for(character.ratings_summary, trait_name)
        mode = DisplayMode.NUMBER
        for entry in character.ratings_summary:
            if names_match(entry.trait_name, trait_name):
                mode = entry.display_mode
                break
        if value is None:
            return "-"
        if self.show_grades and mode is DisplayMode.GRADE:
            return f"{format_rating(value, mode)} ({value})"
        return str(value)

    def _table(
        self, title: str, characters: list[CharacterListItem],
        trait_names: list[str], realm_names: dict[str, str],
    ) -> Table:
        table = Table(title=title, box=box.SIMPLE_HEAVY, title_justify="left")
        table.add_column("Name", style="bold")
        table.add_column("Realm", style="cyan")
        table.add_column("Gender", style="dim")
        for name in trait_names:
            table.add_column(name, justify="right")
        for c in characters:
            table.add_row(
                c.name,
                realm_names.get(c.realm_id, c.realm_id),
                c.gender or "",
                *(self._cell(c, name) for name in trait_names),
            )
        return table

    def show_filters(self, filters: list[TraitFilter]) -> None:
        if not filters:
            return
        text = Text("Filters: ", style="bold")
        for i, f in enumerate(filters):
            if i:
                text.append(", ")
            text.append(f"{f.trait_name} ", style="yellow")
            text.append(f"{comparison_label(f.comparison)} ", style="dim")
            text.append(serialize_filter(f))
        self.console.print(text)

    def show_characters(
        self, result: FilterResult, filters: list[TraitFilter], realm_names: dict[str, str],
    ) -> None:
        trait_names = [f.trait_name for f in filters]
        self.show_filters(filters)
        if not result.matched and not result.unrated:
            self.console.print("[dim]No characters match.[/dim]")
            return
        if result.matched:
            self.console.print(self._table(
                f"Characters ({len(result.matched)})", result.matched, trait_names, realm_names,
            ))
        if result.unrated:
            self.console.print(self._table(
                f"Unrated ({len(result.unrated)})", result.unrated, trait_names, realm_names,
            ))

    def show_move_result(self, character_name: str, realm_name: str, result: MigrationResult) -> None:
        if not result.moved:
            self.console.print(f"{character_name} is already in [cyan]{realm_name}[/cyan]; nothing moved.")
            return
        self.console.print(f"[green]Moved[/green] {character_name} to [cyan]{realm_name}[/cyan].")
        if result.unmapped_traits:
            body = Text()
            body.append(f"{realm_name} has no trait named:\n", style="bold")
            for name in result.unmapped_traits:
                body.append(f"  - {name}\n", style="yellow")
            body.append("These ratings were removed.", style="dim")
            self.console.print(Panel(body, title="Ratings lost", border_style="yellow", box=box.ROUNDED))

    def show_ok(self, message: str) -> None:
        self.console.print(f"[green]{message}[/green]")

    def show_error(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {message}")
