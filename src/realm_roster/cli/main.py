"""Typer CLI application."""
from __future__ import annotations

from typing import List, Optional
from urllib.parse import parse_qsl

import typer
from pydantic import ValidationError

from realm_roster.errors import RealmRosterError

app = typer.Typer(
    name="realm-roster",
    help="Group characters into realms and rate them against realm traits",
    no_args_is_help=True,
)
realm_app = typer.Typer(help="Create and join realms", no_args_is_help=True)
trait_app = typer.Typer(help="Manage realm traits", no_args_is_help=True)
character_app = typer.Typer(help="Manage characters", no_args_is_help=True)
app.add_typer(realm_app, name="realm")
app.add_typer(trait_app, name="trait")
app.add_typer(character_app, name="character")

_state: dict = {"db": None, "config": None}

UserOption = typer.Option(..., "--user", "-u", help="Acting user id")


@app.callback()
def main(
    db: Optional[str] = typer.Option(None, "--db", help="Database file (overrides config.toml)"),
    config: Optional[str] = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    """Realm roster command line."""
    _state["db"] = db
    _state["config"] = config


def _app():
    from realm_roster.app import RosterApp, _load_config, configure_logging

    config = _load_config(_state["config"])
    configure_logging(config)
    return RosterApp(config=config, db_path=_state["db"])


def _display(roster):
    from realm_roster.cli.display import Display

    return Display(show_grades=roster.show_grades)


def _fail(roster, exc: Exception) -> None:
    _display(roster).show_error(str(exc))
    raise typer.Exit(code=1)


# -- Realms --

@realm_app.command("create")
def realm_create(name: str, user: str = UserOption) -> None:
    """Create a realm owned by USER."""
    roster = _app()
    try:
        realm, _ = roster.realms.create_realm(user, name)
    except (RealmRosterError, ValidationError) as exc:
        _fail(roster, exc)
    _display(roster).show_ok(f"Created realm {realm.name} ({realm.id})")


@realm_app.command("join")
def realm_join(realm_id: str, user: str = UserOption) -> None:
    """Add USER to a realm."""
    roster = _app()
    try:
        roster.realms.join_realm(user, realm_id)
    except RealmRosterError as exc:
        _fail(roster, exc)
    _display(roster).show_ok(f"Joined realm {realm_id}")


@realm_app.command("leave")
def realm_leave(realm_id: str, user: str = UserOption) -> None:
    """Remove USER from a realm they do not own."""
    roster = _app()
    try:
        roster.realms.leave_realm(user, realm_id)
    except RealmRosterError as exc:
        _fail(roster, exc)
    _display(roster).show_ok(f"Left realm {realm_id}")


@realm_app.command("delete")
def realm_delete(realm_id: str, user: str = UserOption) -> None:
    """Delete a realm with all of its characters, traits and ratings. Owner only."""
    roster = _app()
    try:
        roster.realms.delete_realm(user, realm_id)
    except RealmRosterError as exc:
        _fail(roster, exc)
    _display(roster).show_ok(f"Deleted realm {realm_id}")


# -- Traits --

@trait_app.command("add")
def trait_add(
    realm_id: str,
    name: str,
    mode: str = typer.Option("grade", "--mode", help="number or grade"),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
    user: str = UserOption,
) -> None:
    """Define a trait in a realm."""
    roster = _app()
    try:
        trait, _ = roster.traits.create_trait(user, realm_id, name, display_mode=mode, description=description)
    except (RealmRosterError, ValidationError, ValueError) as exc:
        _fail(roster, exc)
    _display(roster).show_ok(f"Added trait {trait.name} ({trait.id})")


@trait_app.command("delete")
def trait_delete(trait_id: str, user: str = UserOption) -> None:
    """Delete a trait and every rating given for it."""
    roster = _app()
    try:
        roster.traits.delete_trait(user, trait_id)
    except RealmRosterError as exc:
        _fail(roster, exc)
    _display(roster).show_ok(f"Deleted trait {trait_id}")


# -- Characters --

@character_app.command("create")
def character_create(
    realm_id: str,
    name: str,
    gender: Optional[str] = typer.Option(None, "--gender", "-g"),
    notes: Optional[str] = typer.Option(None, "--notes"),
    user: str = UserOption,
) -> None:
    """Create a character in a realm."""
    roster = _app()
    try:
        character, _ = roster.characters.create_character(user, realm_id, name, gender=gender, notes=notes)
    except (RealmRosterError, ValidationError) as exc:
        _fail(roster, exc)
    _display(roster).show_ok(f"Created character {character.name} ({character.id})")


@character_app.command("delete")
def character_delete(character_id: str, user: str = UserOption) -> None:
    """Delete a character and its ratings."""
    roster = _app()
    try:
        roster.characters.delete_character(user, character_id)
    except RealmRosterError as exc:
        _fail(roster, exc)
    _display(roster).show_ok(f"Deleted character {character_id}")


def _resolve_trait_id(roster, user: str, realm_id: str, trait: str) -> str:
    """Accept a trait id or a trait name; an exact name beats a case-insensitive one."""
    from realm_roster.mechanics.filter_engine import names_match

    traits = roster.traits.list_traits(user, realm_id)
    for t in traits:
        if trait in (t.id, t.name):
            return t.id
    for t in traits:
        if names_match(t.name, trait):
            return t.id
    return trait


@app.command()
def rate(
    character_id: str,
    trait: str = typer.Argument(..., help="Trait id or name"),
    value: str = typer.Argument(..., help="1-20 or a grade such as B+"),
    user: str = UserOption,
) -> None:
    """Rate a character on one trait of its realm."""
    roster = _app()
    try:
        character = roster.characters.get_character(user, character_id)
        realm_id = character.realm_id if character else ""
        trait_id = _resolve_trait_id(roster, user, realm_id, trait) if character else trait
        rating, _ = roster.ratings.upsert_rating(user, character_id, trait_id, value)
    except RealmRosterError as exc:
        _fail(roster, exc)
    _display(roster).show_ok(f"Rated {character_id}: {rating.value}")


@app.command()
def move(character_id: str, realm_id: str, user: str = UserOption) -> None:
    """Move a character to another realm, carrying ratings over by trait name."""
    from realm_roster.models.character import CharacterUpdate

    roster = _app()
    try:
        character = roster.characters.get_character(user, character_id)
        result = roster.characters.update_character(user, CharacterUpdate(id=character_id, realm_id=realm_id))
    except RealmRosterError as exc:
        _fail(roster, exc)
    realm = roster.repos["realm"].get(realm_id)
    _display(roster).show_move_result(
        character.name if character else character_id,
        realm["name"] if realm else realm_id,
        result,
    )


def _filters_from_options(trait_options: list[str], query: str | None, threshold: int):
    from realm_roster.mechanics.trait_filters import (
        add_trait_filter,
        param_key,
        parse_trait_filters,
    )

    params: dict[str, str] = dict(parse_qsl((query or "").lstrip("?")))
    for option in trait_options:
        name, sep, token = option.partition("=")
        if sep:
            params[param_key(name)] = token
        else:
            params = add_trait_filter(params, name, threshold)
    return parse_trait_filters(params)


@app.command("list")
def list_characters(
    realm: Optional[List[str]] = typer.Option(None, "--realm", "-r", help="Realm id (repeatable)"),
    trait: Optional[List[str]] = typer.Option(
        None, "--trait", "-t", help='Trait filter such as "Strength=gte.12" (repeatable)',
    ),
    query: Optional[str] = typer.Option(None, "--query", "-q", help="URL query string of trait.* filters"),
    search: str = typer.Option("", "--search", "-s"),
    gender: Optional[str] = typer.Option(None, "--gender", "-g"),
    creator: Optional[str] = typer.Option(None, "--creator"),
    user: str = UserOption,
) -> None:
    """List characters, split into matches and characters unrated for the filters."""
    from realm_roster.mechanics.filter_engine import filter_characters
    from realm_roster.models.filters import CharacterQuery

    roster = _app()
    filters = _filters_from_options(trait or [], query, roster.default_threshold)
    try:
        characters = roster.characters.list_across_realms(user, realm or None)
    except RealmRosterError as exc:
        _fail(roster, exc)
    result = filter_characters(characters, filters, CharacterQuery(search=search, gender=gender, creator=creator))
    realm_names = {r.id: r.name for r in roster.realms.list_realms(user)}
    _display(roster).show_characters(result, filters, realm_names)


if __name__ == "__main__":
    app()
