"""This module abstracts the database driver logic for accessing the
   game rules, guild channel settings and permission data.
"""

from abc import ABC, abstractmethod
import asyncio
import logging
import sqlite3
from typing import Any, Iterable, Optional, Union

import psycopg2

from teamdraft.config import cfg
from teamdraft import errors

logger = logging.getLogger(__name__)

# Discord IDs are Twitter Snowflakes, which fit the signed 64 bit range
# for the foreseeable future.
TABLES = (
    """CREATE TABLE IF NOT EXISTS gamerules (
                    guild_id bigint NOT NULL,
                    cmd_channel_id bigint NOT NULL,
                    rule_name text NOT NULL,
                    enabled boolean,
                    value text,
                    PRIMARY KEY (guild_id, cmd_channel_id, rule_name));""",
    """CREATE TABLE IF NOT EXISTS command_channels (
                    guild_id bigint NOT NULL,
                    channel_id bigint NOT NULL,
                    PRIMARY KEY (guild_id, channel_id));""",
    """CREATE TABLE IF NOT EXISTS channel_settings (
                    guild_id bigint NOT NULL,
                    cmd_channel_id bigint NOT NULL,
                    setting text NOT NULL,
                    team_name text NOT NULL DEFAULT '',
                    value bigint NOT NULL,
                    PRIMARY KEY (guild_id, cmd_channel_id, setting,
                                 team_name));""",
    """CREATE TABLE IF NOT EXISTS permissions (
                    guild_id bigint NOT NULL,
                    subject_type text NOT NULL,
                    subject_id bigint NOT NULL,
                    node text NOT NULL,
                    PRIMARY KEY (guild_id, subject_type, subject_id, node));""",
)


class DbDriver(ABC):
    """Abstract DB driver base. All DB drivers should inherit from this."""

    driver_errors: tuple[type[Exception], ...] = ()

    def __init__(self, *_args: Any, **_kwargs: Any):
        self.lock = asyncio.Lock()
        self.connection: Union[
            None, sqlite3.Connection, "psycopg2.extensions.connection"
        ] = None

    def __del__(self) -> None:
        self.close()

    def close(self) -> None:
        if self.connection is not None:
            self.connection.close()
            self.connection = None

    def create_tables(self) -> None:
        """Creates the tables this bot uses, unless they already exist."""
        assert self.connection is not None
        cursor = self.connection.cursor()
        try:
            for table in TABLES:
                cursor.execute(table)
            self.connection.commit()
        finally:
            cursor.close()

    async def get_game_rules(self, guild_id: int, cmd_channel_id: int
                             ) -> list[dict[str, Any]]:
        """Get all the game rule overrides of a command channel."""
        res = await self._execute(
            f"""SELECT rule_name, enabled, value FROM gamerules
                WHERE guild_id = {self.bind_placeholder}
                AND cmd_channel_id = {self.bind_placeholder};""",
            (guild_id, cmd_channel_id),
        )
        return [dict(zip(("rule_name", "enabled", "value"), x)) for x in res]

    async def set_game_rule_enabled(self, guild_id: int, cmd_channel_id: int,
                                    rule_name: str, enabled: bool) -> None:
        """Upsert the enabled state of a game rule, keeping its value."""
        await self._execute(
            f"""INSERT INTO gamerules
                (guild_id, cmd_channel_id, rule_name, enabled) VALUES
                ({self.bind_placeholder}, {self.bind_placeholder},
                 {self.bind_placeholder}, {self.bind_placeholder})
                ON CONFLICT (guild_id, cmd_channel_id, rule_name)
                DO UPDATE SET enabled = excluded.enabled;""",
            (guild_id, cmd_channel_id, rule_name, enabled),
        )

    async def set_game_rule_value(self, guild_id: int, cmd_channel_id: int,
                                  rule_name: str, enabled: bool,
                                  value: Optional[str]) -> None:
        """Upsert both the enabled state and the value of a game rule."""
        await self._execute(
            f"""INSERT INTO gamerules
                (guild_id, cmd_channel_id, rule_name, enabled, value) VALUES
                ({self.bind_placeholder}, {self.bind_placeholder},
                 {self.bind_placeholder}, {self.bind_placeholder},
                 {self.bind_placeholder})
                ON CONFLICT (guild_id, cmd_channel_id, rule_name)
                DO UPDATE SET enabled = excluded.enabled,
                              value = excluded.value;""",
            (guild_id, cmd_channel_id, rule_name, enabled, value),
        )

    async def add_command_channel(self, guild_id: int,
                                  channel_id: int) -> bool:
        """Returns whether the channel wasn't already registered."""
        return await self._execute(
            f"""INSERT INTO command_channels (guild_id, channel_id) VALUES
                ({self.bind_placeholder}, {self.bind_placeholder})
                ON CONFLICT (guild_id, channel_id) DO NOTHING;""",
            (guild_id, channel_id),
            rowcount=True,
        ) > 0

    async def remove_command_channel(self, guild_id: int,
                                     channel_id: int) -> bool:
        """Unregisters the command channel, along with its channel settings
           and game rule overrides.

           Returns whether the channel was registered.
        """
        removed = await self._execute(
            f"""DELETE FROM command_channels
                WHERE guild_id = {self.bind_placeholder}
                AND channel_id = {self.bind_placeholder};""",
            (guild_id, channel_id),
            rowcount=True,
        )
        for table in ("channel_settings", "gamerules"):
            await self._execute(
                f"""DELETE FROM {table}
                    WHERE guild_id = {self.bind_placeholder}
                    AND cmd_channel_id = {self.bind_placeholder};""",
                (guild_id, channel_id),
            )
        return removed > 0

    async def get_command_channels(self, guild_id: int) -> list[int]:
        res = await self._execute(
            f"""SELECT channel_id FROM command_channels
                WHERE guild_id = {self.bind_placeholder};""",
            (guild_id,),
        )
        return [int(x[0]) for x in res]

    async def set_channel_setting(self, guild_id: int, cmd_channel_id: int,
                                  setting: str, team_name: str,
                                  value: int) -> None:
        await self._execute(
            f"""INSERT INTO channel_settings
                (guild_id, cmd_channel_id, setting, team_name, value) VALUES
                ({self.bind_placeholder}, {self.bind_placeholder},
                 {self.bind_placeholder}, {self.bind_placeholder},
                 {self.bind_placeholder})
                ON CONFLICT (guild_id, cmd_channel_id, setting, team_name)
                DO UPDATE SET value = excluded.value;""",
            (guild_id, cmd_channel_id, setting, team_name, value),
        )

    async def get_channel_setting(self, guild_id: int, cmd_channel_id: int,
                                  setting: str,
                                  team_name: str) -> Optional[int]:
        res = await self._execute(
            f"""SELECT value FROM channel_settings
                WHERE guild_id = {self.bind_placeholder}
                AND cmd_channel_id = {self.bind_placeholder}
                AND setting = {self.bind_placeholder}
                AND team_name = {self.bind_placeholder};""",
            (guild_id, cmd_channel_id, setting, team_name),
        )
        return int(res[0][0]) if res else None

    async def get_permission_nodes(self, guild_id: int, subject_type: str,
                                   subject_ids: Iterable[int]) -> set[str]:
        """Get the union of the permission nodes granted to the subjects."""
        subject_ids = tuple(subject_ids)
        if not subject_ids:
            return set()
        res = await self._execute(
            f"""SELECT node FROM permissions
                WHERE guild_id = {self.bind_placeholder}
                AND subject_type = {self.bind_placeholder}
                AND subject_id IN
                ({', '.join([self.bind_placeholder for _ in subject_ids])});""",
            (guild_id, subject_type) + subject_ids,
        )
        return {x[0] for x in res}

    async def add_permission(self, guild_id: int, subject_type: str,
                             subject_id: int, node: str) -> bool:
        """Returns whether the node wasn't already granted."""
        return await self._execute(
            f"""INSERT INTO permissions
                (guild_id, subject_type, subject_id, node) VALUES
                ({self.bind_placeholder}, {self.bind_placeholder},
                 {self.bind_placeholder}, {self.bind_placeholder})
                ON CONFLICT (guild_id, subject_type, subject_id, node)
                DO NOTHING;""",
            (guild_id, subject_type, subject_id, node),
            rowcount=True,
        ) > 0

    async def remove_permissions(self, guild_id: int, subject_type: str,
                                 subject_id: int,
                                 node: Optional[str] = None) -> int:
        """Removes one node, or all nodes if node is None.

           Returns the number of removed grants.
        """
        query = f"""DELETE FROM permissions
                    WHERE guild_id = {self.bind_placeholder}
                    AND subject_type = {self.bind_placeholder}
                    AND subject_id = {self.bind_placeholder}"""
        my_vars: tuple[Any, ...] = (guild_id, subject_type, subject_id)
        if node is not None:
            query += f" AND node = {self.bind_placeholder}"
            my_vars += (node,)
        query += ";"
        return await self._execute(query, my_vars, rowcount=True)

    async def _execute(self, query: str,
                       my_vars: Optional[tuple[Any, ...]] = None,
                       rowcount: bool = False) -> Any:
        """Returns a list of all fetched results of the query, or the number
           of affected rows if rowcount is set.

           If there were no results, returns an empty list.
           Driver errors are raised as StoreError.
        """
        async with self.lock:
            assert self.connection is not None
            cursor = self.connection.cursor()
            try:
                cursor.execute(query, my_vars if my_vars is not None else ())
                res = cursor.fetchall() if cursor.description else []
                count = cursor.rowcount
                self.connection.commit()
            except self.driver_errors as err:
                logger.error("Query failed: %s", err)
                self.connection.rollback()
                raise errors.StoreError(err) from err
            finally:
                cursor.close()
        return count if rowcount else res

    @abstractmethod
    async def _drop_tables(self):
        """Drops all of the tables in this DB's schema."""

    @property
    @abstractmethod
    def bind_placeholder(self) -> str:
        """Returns the placeholder used for binding values in SQL queries."""


class Sqlite3(DbDriver):
    """DB driver for SQLite 3."""

    driver_errors = (sqlite3.Error,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        database = kwargs["database"]
        if database != ":memory:":
            database = database.removesuffix(".sqlite3") + ".sqlite3"
        self.connection = sqlite3.connect(database=database)

    async def _drop_tables(self):
        logger.warning("Drop tables: sqlite3")
        names = await self._execute(
            "SELECT name FROM sqlite_master WHERE type = 'table';")
        for (name,) in names:
            await self._execute(f"DROP TABLE IF EXISTS {name};")

    @property
    def bind_placeholder(self):
        return "?"


class Postgres(DbDriver):
    """DB driver for Postgres."""

    driver_errors = (psycopg2.Error,)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        logger.info("Connecting to Postgres database: %s", kwargs["dbname"])
        self.connection = psycopg2.connect(
            dbname=kwargs["dbname"],
            user=kwargs["user"],
            password=kwargs["password"],
            host=kwargs["host"],
            port=kwargs["port"],
        )

    async def _drop_tables(self):
        logger.warning("Drop tables: postgres")
        await self._execute("""
DO $$ DECLARE
    tabname RECORD;
BEGIN
    FOR tabname IN (SELECT tablename
                    FROM pg_tables
                    WHERE schemaname = current_schema())
LOOP
    EXECUTE 'DROP TABLE IF EXISTS ' || quote_ident(tabname.tablename) || ' CASCADE';
END LOOP;
END $$;""")

    @property
    def bind_placeholder(self):
        return "%s"


def connect() -> DbDriver:
    """Connects to the database configured by "TEAMDRAFT_DB_DRIVER", and
       makes sure the tables exist.
    """
    driver = cfg("TEAMDRAFT_DB_DRIVER")
    db: Optional[DbDriver] = None
    if driver == "postgres":
        db = Postgres(
            dbname=cfg("TEAMDRAFT_DB_NAME"),
            user=cfg("TEAMDRAFT_DB_USER"),
            password=cfg("TEAMDRAFT_DB_SECRET"),
            host=cfg("TEAMDRAFT_DB_HOST"),
            port=cfg("TEAMDRAFT_DB_PORT"),
        )
    elif driver == "sqlite3":
        db = Sqlite3(database=cfg("TEAMDRAFT_DB_NAME"))
    assert db is not None, f"Unsupported DB driver: {driver}"
    db.create_tables()
    return db
