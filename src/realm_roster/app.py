"""Application bootstrap: config, logging and lazily built services."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "REALM_ROSTER_CONFIG"


def _load_config(path: str | os.PathLike | None = None) -> dict[str, Any]:
    """Load config.toml from the given path, $REALM_ROSTER_CONFIG or the project root."""
    import tomllib

    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or Path(__file__).parent.parent.parent / "config.toml"
    config_path = Path(path)
    if config_path.exists():
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    return {}


def configure_logging(config: dict[str, Any]) -> None:
    level_name = str(config.get("logging", {}).get("level", "WARNING")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class RosterApp:
    """Wires storage, repositories and services together."""

    def __init__(self, config: dict[str, Any] | None = None, db_path: str | None = None):
        self.config = config if config is not None else _load_config()
        self.db_path_override = db_path

        # Lazy-initialized components
        self._db = None
        self._repos: dict[str, Any] | None = None
        self._characters = None
        self._ratings = None
        self._traits = None
        self._realms = None

    @property
    def db(self):
        if self._db is None:
            from realm_roster.storage.database import Database

            db_path = self.db_path_override or self.config.get("storage", {}).get(
                "db_path", "data/realm_roster.db"
            )
            self._db = Database(db_path)
            self._db.initialize()
            logger.debug("Opened database at %s", db_path)
        return self._db

    @property
    def repos(self) -> dict[str, Any]:
        if self._repos is None:
            from realm_roster.engine import build_repos

            self._repos = build_repos(self.db)
        return self._repos

    @property
    def characters(self):
        if self._characters is None:
            from realm_roster.engine.characters import CharacterService

            self._characters = CharacterService(self.repos)
        return self._characters

    @property
    def ratings(self):
        if self._ratings is None:
            from realm_roster.engine.ratings import RatingService

            self._ratings = RatingService(self.repos)
        return self._ratings

    @property
    def traits(self):
        if self._traits is None:
            from realm_roster.engine.traits import TraitService

            self._traits = TraitService(self.repos)
        return self._traits

    @property
    def realms(self):
        if self._realms is None:
            from realm_roster.engine.realms import RealmService

            self._realms = RealmService(self.repos)
        return self._realms

    @property
    def show_grades(self) -> bool:
        return bool(self.config.get("display", {}).get("show_grades", True))

    @property
    def default_threshold(self) -> int:
        return int(self.config.get("filters", {}).get("default_threshold", 10))

    def close(self) -> None:
        if self._db is not None:
            self._db.close()
            self._db = None
