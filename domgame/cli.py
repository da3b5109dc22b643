"""Cli entrypoint to play the puzzle.

Provides a command line interface to play rounds and inspect graph catalogs. See `domgame --help` for further options.
"""
import logging
from importlib.metadata import version as pkg_version
from pathlib import Path
from random import Random
from typing import Annotated, ClassVar, Optional

from anyio import run as run_async_fn
from anyio.to_thread import run_sync
from pydantic import ValidationError
from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Column, Table
from rich.theme import Theme
from tomlkit import comment, document, dumps as dumps_toml, nl as toml_newline, table
from typer import Abort, Argument, Exit, Option, Typer, get_app_dir, launch

from domgame.animation import PopAnimator
from domgame.config import DatasetConfig, GameConfig
from domgame.dataset import Dataset
from domgame.layout import Viewport
from domgame.render import TerminalCanvas, build_scene
from domgame.session import GameSession, SessionPhase, SessionUi
from domgame.state import Verdict
from domgame.util import DatasetError, ExceptionInfo, SessionError
from domgame.verifier import domination_number


__all__ = ("app",)

help_message = """The dominating set puzzle.

Select nodes until every node of the graph is selected or next to a selected one, using as few nodes as possible.
"""
app = Typer(pretty_exceptions_show_locals=True, help=help_message)
theme = Theme(
    {
        "success": "green",
        "warning": "orange3",
        "error": "red",
        "attention": "magenta2",
        "heading": "blue",
        "info": "dim cyan",
    }
)
console = Console(theme=theme)

commands_help = (
    "[heading]Commands[/]: [attention]<node>[/] toggle a node, [attention]c <x> <y>[/] click at a point, "
    "[attention]v[/] verify, [attention]h[/] hint, [attention]n[/] new graph, "
    "[attention]r <width> <height>[/] resize, [attention]q[/] quit"
)


class CliConfig:
    """The per user config file, used when no other config is given."""

    path: ClassVar[Path] = Path(get_app_dir("domgame")) / "config.toml"

    @classmethod
    def init_file(cls) -> None:
        """Initializes the config file if it does not exist."""
        if not cls.path.is_file():
            cls.path.parent.mkdir(parents=True, exist_ok=True)
            defaults = GameConfig()
            doc = (
                document()
                .add(comment("The domgame cli configuration"))
                .add(toml_newline())
                .append("dataset", table().append("source", defaults.dataset.source))
                .append(
                    "display",
                    table().append("width", defaults.display.width).append("height", defaults.display.height),
                )
            )
            cls.path.write_text(dumps_toml(doc))

    @classmethod
    def load(cls) -> GameConfig:
        """Parses the config file."""
        cls.init_file()
        return GameConfig.from_file(cls.path)


def setup_logging(verbose: bool) -> None:
    """Sends the package's log messages to the console."""
    logger = logging.getLogger("domgame")
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=console, show_path=False))
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def print_error(error: Exception, verbose: bool) -> None:
    """Prints an error message, and its details if requested."""
    info = ExceptionInfo.from_exception(error)
    console.print(f"[error]{info.message}")
    if verbose and info.detail:
        console.print(info.detail)


def resolve_config(source: Path | None, url: str | None) -> GameConfig:
    """Figures out which config to use from the cli arguments."""
    try:
        if source is not None and source.suffix == ".toml":
            config = GameConfig.from_file(source)
        else:
            config = CliConfig.load()
    except (ValueError, ValidationError) as e:
        console.print(f"[error]Improperly formatted config file[/]\nError: {e}")
        raise Abort
    if url is not None:
        config.dataset = DatasetConfig(source=url, timeout=config.dataset.timeout)
    elif source is not None and source.suffix != ".toml":
        config.dataset = DatasetConfig(source=str(source), timeout=config.dataset.timeout)
    return config


class CliUi(SessionUi):
    """Ui that uses rich to draw to the console."""

    def __init__(self, config: GameConfig) -> None:
        self.config = config
        self.canvas = TerminalCanvas(config.display.viewport, config.display.cell_width, config.display.cell_height)

    def board(self, session: GameSession) -> RenderableType:
        """Draws the current round."""
        round = session.round
        assert round is not None
        scene = build_scene(round.graph, session.positions, session.selection, round.last_verdict, session.node_radius)
        selected = ", ".join(map(str, session.selection)) or "nothing"
        hint = f" | minimum size: {session.revealed_hint}" if session.revealed_hint is not None else ""
        return Panel(
            self.canvas.draw(scene, session.node_radius),
            title=f"[heading]Graph {round.graph_index}[/] ({round.graph.node_count} nodes)",
            subtitle=f"selected: {selected}{hint}",
        )

    def ask(self) -> str:
        """Waits for the next command."""
        return Prompt.ask("[heading]Command", console=console)

    async def pop(self, session: GameSession, animator: PopAnimator, index: int) -> None:
        """Plays the pop of a toggled node, then prints the settled board."""
        with Live(self.board(session), console=console, transient=True, auto_refresh=False) as live:
            animator.on_frame = lambda: live.update(self.board(session), refresh=True)
            await animator.animate(index, session.positions[index])
        console.print(self.board(session))

    def round_started(self, session: GameSession) -> None:  # noqa: D102
        console.rule(f"[heading]domgame {pkg_version('domgame')}")
        console.print(self.board(session))
        console.print(commands_help)

    def layout_changed(self, session: GameSession) -> None:  # noqa: D102
        self.canvas.resize(session.viewport)
        console.print(self.board(session))

    def verdict(self, session: GameSession, verdict: Verdict) -> None:  # noqa: D102
        if verdict.correct:
            console.print("[success]Congratulations! You found a minimum dominating set!")
            return
        console.print(self.board(session))
        if not verdict.dominating:
            missing = ", ".join(map(str, sorted(verdict.undominated)))
            console.print(f"[error]Incorrect.[/] Your selection does not dominate the nodes {missing}.")
        elif len(verdict.selection) > verdict.domination_number:
            console.print("[error]Incorrect.[/] Your selection dominates the graph but is not a minimum one.")
        else:
            console.print("[error]Incorrect.[/] The selected set is not a minimum dominating set.")
        console.print("A minimum dominating set is shown in [red]red brackets[/].")

    def hint(self, session: GameSession, size: int) -> None:  # noqa: D102
        console.print(f"[info]The minimum dominating set has {size} nodes.")

    def load_failed(self, session: GameSession, error: DatasetError) -> None:  # noqa: D102
        console.print(f"[error]Could not load the game.[/] {error.message} Try restarting it.")


async def _game_loop(session: GameSession, ui: CliUi, animator: PopAnimator) -> None:
    while True:
        command = await run_sync(ui.ask)
        try:
            match command.strip().lower().split():
                case []:
                    continue
                case ["q" | "quit"]:
                    return
                case ["v" | "verify"]:
                    session.verify()
                case ["h" | "hint"]:
                    if session.request_hint() is None:
                        console.print("[warning]You already got the hint for this graph.")
                case ["n" | "new"]:
                    animator.cancel_all()
                    session.new_round()
                case ["r" | "resize", width, height]:
                    session.resize(Viewport(float(width), float(height), session.viewport.pixel_ratio))
                case ["c" | "click", x, y]:
                    index = session.click(float(x), float(y))
                    if index is None:
                        console.print("[warning]There is no node at that point.")
                    else:
                        await ui.pop(session, animator, index)
                case [node] if node.isdigit():
                    assert session.round is not None
                    index = int(node)
                    if not session.round.graph.has_node(index):
                        console.print(f"[warning]The graph has no node {index}.")
                        continue
                    session.toggle(index)
                    await ui.pop(session, animator, index)
                case _:
                    console.print(commands_help)
        except ValueError as e:
            console.print(f"[error]Invalid command[/]: {e}")


@app.command()
def play(
    source: Annotated[
        Optional[Path],
        Argument(
            exists=True,
            dir_okay=False,
            help="A config file or a graph catalog. If omitted the user config file is used.",
        ),
    ] = None,
    url: Annotated[Optional[str], Option(help="Url of a graph catalog to download instead.")] = None,
    seed: Annotated[Optional[int], Option(help="Seed used to pick the graphs.")] = None,
    verbose: Annotated[bool, Option("--verbose", "-v", help="Whether to show debug output.")] = False,
) -> None:
    """Plays the puzzle in the terminal."""
    setup_logging(verbose)
    config = resolve_config(source, url)
    if seed is not None:
        config.game.seed = seed
    ui = CliUi(config)
    session = GameSession(
        config.display.viewport,
        node_radius=config.display.node_radius,
        rng=Random(config.game.seed),
        ui=ui,
    )
    animator = PopAnimator(config.animation.frames, config.animation.amplitude, config.animation.frame_interval)
    try:
        with console.status("Loading the graph catalog"):
            run_async_fn(session.load, config.dataset.source, config.dataset.timeout)
        if session.phase == SessionPhase.failed:
            assert session.error is not None
            if verbose and session.error.detail:
                console.print(session.error.detail)
            raise Exit(1)
        run_async_fn(_game_loop, session, ui, animator)
    except SessionError as e:
        print_error(e, verbose)
        raise Abort
    except (KeyboardInterrupt, EOFError):
        console.print("[info]Stopping the game")


@app.command()
def check(
    dataset: Annotated[Path, Argument(exists=True, dir_okay=False, help="Path to the graph catalog.")],
    verbose: Annotated[bool, Option("--verbose", "-v", help="Whether to show detailed errors.")] = False,
) -> None:
    """Validates a graph catalog and summarizes the graphs in it."""
    setup_logging(verbose)
    try:
        with console.status("Validating the graph catalog"):
            catalog = Dataset.from_file(dataset)
    except DatasetError as e:
        print_error(e, verbose)
        raise Abort
    summary = Table(
        Column("Graph", justify="right"),
        Column("Nodes", justify="right"),
        Column("Edges", justify="right"),
        Column("Domination number", justify="right"),
        Column("Minimum sets", justify="right"),
        Column("Positions", justify="right"),
        title="[heading]Graph catalog",
    )
    for index, graph in enumerate(catalog):
        summary.add_row(
            str(index),
            str(graph.node_count),
            str(graph.num_edges),
            str(domination_number(graph)),
            str(len(graph.min_dominating_sets)),
            f"{len(graph.positions or {})}/{graph.node_count}",
        )
    console.print(Group(summary, f"[success]The catalog is valid[/] and contains {len(catalog)} graphs."))


@app.command()
def config() -> None:
    """Opens the domgame cli tool config file."""
    CliConfig.init_file()
    print(f"Opening the domgame cli config file at {CliConfig.path}.")
    launch(str(CliConfig.path))


if __name__ == "__main__":
    app(prog_name="domgame")
