"""Console front end: an interactive weather session with favorites."""

import argparse
import asyncio
import logging
import shlex
from collections.abc import Awaitable, Callable

import httpx

from skyview.app import CityView, WeatherApp, describe_error
from skyview.config.loader import get_config_value, load_config, save_config, set_config_value
from skyview.config.schema import AppConfig
from skyview.errors import GeolocationError, WeatherError
from skyview.favorites.store import FavoritesStore
from skyview.geolocation import ConfiguredLocation
from skyview.ingest.openweather_client import OpenWeatherClient
from skyview.refresh.loop import RefreshLoop
from skyview.reporting.formatters import (
    NO_FORECAST,
    format_chart_text,
    format_favorites_text,
    format_snapshot_text,
)
from skyview.storage.database import connect, run_migrations
from skyview.storage.favorites_repo import SqliteFavoritesRepo

DEFAULT_CONFIG = "config/skyview.yaml"
PROMPT = "skyview> "

HELP = """Commands:
  search <city>      current weather and 48h chart
  here               weather at your configured location
  toggle             add/remove the shown city from favorites
  fav                list favorites
  fav add <city>     fetch a city and add it to favorites
  fav rm <city>      remove a favorite
  refresh            refresh stale favorites now
  home               clear the current city
  help               show this help
  quit               leave"""

ReadLine = Callable[[], Awaitable[str | None]]
Write = Callable[[str], None]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="skyview",
        description="Weather lookup with auto-refreshing favorite cities",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="Config YAML path")
    parser.add_argument("--db", default=None, help="SQLite DB path (overrides config)")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("shell", help="Start the interactive session (default)")

    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value and save it")
    set_p.add_argument("keyvalue", help="key=value to set")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    if args.db:
        config = set_config_value(config, "storage.db_path", args.db)

    if args.command == "config":
        return _cmd_config(config, args)
    return asyncio.run(run_shell(config))


def _cmd_config(config: AppConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
        except Exception as e:
            print(f"Error: {e}")
            return 1
        save_config(new_config, args.config)
        print(f"Set {key.strip()} = {get_config_value(new_config, key.strip())}")
        return 0
    else:
        print("Use: config show | config set key=value")
        return 1


async def _read_stdin() -> str | None:
    try:
        return await asyncio.to_thread(input, PROMPT)
    except EOFError:
        return None


async def run_shell(
    config: AppConfig,
    read_line: ReadLine | None = None,
    write: Write = print,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Run the session until quit or end of input.

    The refresh loop keeps favorites current in the background while the
    session waits for input.
    """
    read_line = read_line or _read_stdin
    conn = connect(config.storage.db_path)
    run_migrations(conn)
    store = FavoritesStore(SqliteFavoritesRepo(conn, config.storage.namespace))

    try:
        async with OpenWeatherClient.from_config(config.api, transport=transport) as client:
            app = WeatherApp(
                client,
                store,
                geolocation=ConfiguredLocation.from_config(config.location),
                geolocation_timeout=config.location.timeout_seconds,
            )
            refresher = RefreshLoop.from_config(store, client, config.refresh)
            session = _Session(app, refresher, write)

            refresher.start()
            write(HELP)
            try:
                while True:
                    line = await read_line()
                    if line is None or not await session.handle(line):
                        break
            finally:
                refresher.stop()
                await refresher.wait_idle()
    finally:
        conn.close()
    return 0


class _Session:
    def __init__(self, app: WeatherApp, refresher: RefreshLoop, write: Write):
        self.app = app
        self.refresher = refresher
        self.write = write

    async def handle(self, line: str) -> bool:
        """Run one command. Returns False when the session should end."""
        try:
            words = shlex.split(line)
        except ValueError as e:
            self.write(f"Error: {e}")
            return True
        if not words:
            return True

        cmd, rest = words[0].lower(), words[1:]
        if cmd in ("quit", "exit"):
            return False

        try:
            await self._dispatch(cmd, rest)
        except (WeatherError, GeolocationError) as e:
            self.write(describe_error(e))
        return True

    async def _dispatch(self, cmd: str, rest: list[str]) -> None:
        if cmd == "help":
            self.write(HELP)
        elif cmd == "search":
            if not rest:
                self.write("Usage: search <city>")
                return
            self._show(await self.app.search(" ".join(rest)))
        elif cmd == "here":
            self._show(await self.app.locate())
        elif cmd == "toggle":
            if self.app.current is None:
                self.write("Search for a city first")
                return
            added = self.app.toggle_favorite()
            name = self.app.current.snapshot.name
            self.write(f"{name} {'added to' if added else 'removed from'} favorites")
        elif cmd == "fav":
            await self._fav(rest)
        elif cmd == "refresh":
            started = self.refresher.tick()
            self.write(f"Refreshing {len(started)} favorite(s)")
        elif cmd == "home":
            self.app.back_to_home()
        else:
            self.write(f"Unknown command: {cmd} (try 'help')")

    async def _fav(self, rest: list[str]) -> None:
        store = self.app.store
        if not rest or rest[0] in ("ls", "list"):
            self.write(format_favorites_text(store.list(), self.refresher.in_flight))
            return
        action, city = rest[0], " ".join(rest[1:])
        if not city:
            self.write(f"Usage: fav {action} <city>")
        elif action == "add":
            snapshot = await self.app.client.get_current_by_name(city)
            store.add(snapshot.name, snapshot.country, snapshot)
            self.write(f"{snapshot.name} added to favorites")
        elif action == "rm":
            if store.remove(city):
                self.write(f"{city} removed from favorites")
            else:
                self.write(f"{city} is not a favorite")
        else:
            self.write(f"Unknown fav action: {action}")

    def _show(self, view: CityView) -> None:
        self.write(format_snapshot_text(view.snapshot, self.app.tz))
        if self.app.store.is_favorite(view.snapshot.name):
            self.write("★ favorite")
        if view.forecast_error:
            self.write(f"{NO_FORECAST} ({view.forecast_error})")
        else:
            self.write(format_chart_text(view.chart))


if __name__ == "__main__":
    raise SystemExit(main())
