"""Module defining how a game session is run."""
import logging
from enum import StrEnum
from pathlib import Path
from random import Random
from typing import Protocol

from domgame.dataset import Dataset, load_dataset
from domgame.layout import LayoutPosition, Viewport, compute_layout, hit_test
from domgame.state import RoundState, Selection, Verdict
from domgame.util import DatasetError, SessionError
from domgame.verifier import reveal_hint, verify

logger = logging.getLogger("domgame.session")


class SessionPhase(StrEnum):
    """Where in its lifecycle a session is."""

    loading = "loading"
    ready = "ready"
    verified = "verified"
    failed = "failed"


class SessionUi(Protocol):
    """Base class for a UI that displays a game session.

    The session calls these methods after it changed its state, the ui then reads whatever it needs to redraw from
    the session itself.
    """

    def round_started(self, session: "GameSession") -> None:
        """Tells the ui that a new graph is being played."""
        return

    def layout_changed(self, session: "GameSession") -> None:
        """Informs the ui that the node positions have been recomputed."""
        return

    def selection_changed(self, session: "GameSession", index: int) -> None:
        """Informs the ui that a node has been toggled."""
        return

    def verdict(self, session: "GameSession", verdict: Verdict) -> None:
        """Passes the result of checking the selection to the ui."""
        return

    def hint(self, session: "GameSession", size: int) -> None:
        """Passes the newly revealed hint to the ui."""
        return

    def load_failed(self, session: "GameSession", error: DatasetError) -> None:
        """Tells the ui that the session cannot be played."""
        return


class EmptyUi(SessionUi):
    """A dummy Ui."""


class GameSession:
    """Runs the puzzle: picks graphs, tracks the selection and checks it.

    A session starts out loading its catalog. Once that succeeded it is ready and stays that way, if it fails the
    session can't be used anymore. All commands run to completion synchronously.
    """

    def __init__(
        self,
        viewport: Viewport,
        *,
        node_radius: float = 15,
        rng: Random | None = None,
        ui: SessionUi | None = None,
    ) -> None:
        """Creates a session that still needs to be given a catalog.

        Args:
            viewport: Size of the surface the graph is drawn on.
            node_radius: Radius nodes are drawn with, in logical units.
            rng: Source of randomness used to pick graphs.
            ui: Ui that gets notified about changes.
        """
        self.viewport = viewport
        self.node_radius = node_radius
        self.rng = rng or Random()
        self.ui: SessionUi = ui or EmptyUi()
        self.dataset: Dataset | None = None
        self.error: DatasetError | None = None
        self.round: RoundState | None = None
        self.selection = Selection()
        self.positions: list[LayoutPosition] = []
        self.revealed_hint: int | None = None

    @property
    def phase(self) -> SessionPhase:
        """The current phase of the session."""
        if self.error is not None:
            return SessionPhase.failed
        if self.round is None:
            return SessionPhase.loading
        if self.round.last_verdict is not None:
            return SessionPhase.verified
        return SessionPhase.ready

    def _active_round(self) -> RoundState:
        match self.phase:
            case SessionPhase.loading:
                raise SessionError("The graph catalog is still loading.")
            case SessionPhase.failed:
                raise SessionError("The game could not be loaded.")
        assert self.round is not None
        return self.round

    async def load(self, source: str | Path, timeout: float | None = None) -> None:
        """Loads the catalog and starts the first round.

        Failing to load the catalog does not raise an exception, instead the session moves into the failed phase.
        """
        if self.phase != SessionPhase.loading:
            raise SessionError("The session has already been loaded.")
        try:
            dataset = await load_dataset(source, timeout)
        except DatasetError as e:
            self.fail(e)
        else:
            self.start(dataset)

    def start(self, dataset: Dataset) -> None:
        """Uses the catalog for this session and starts the first round."""
        if self.phase != SessionPhase.loading:
            raise SessionError("The session has already been loaded.")
        self.dataset = dataset
        self.new_round()

    def fail(self, error: DatasetError) -> None:
        """Marks the session as unusable."""
        if self.phase != SessionPhase.loading:
            raise SessionError("Only a loading session can fail.")
        logger.error("Could not load the graph catalog: %s", error.message)
        self.error = error
        self.ui.load_failed(self, error)

    def new_round(self) -> RoundState:
        """Starts a round with a graph that differs from the previous one, if the catalog allows it."""
        if self.error is not None:
            raise SessionError("The game could not be loaded.")
        if self.dataset is None:
            raise SessionError("The graph catalog is still loading.")
        previous = self.round.graph_index if self.round is not None else None
        index = self.dataset.pick(previous, self.rng)
        self.round = RoundState(graph=self.dataset[index], graph_index=index, previous_graph_index=previous)
        self.selection.clear()
        self.revealed_hint = None
        self.positions = self._layout()
        logger.info("Started a round with graph %d (%d nodes).", index, self.round.graph.node_count)
        self.ui.round_started(self)
        return self.round

    def _layout(self) -> list[LayoutPosition]:
        assert self.round is not None
        return compute_layout(self.round.graph, self.viewport.width, self.viewport.height, self.node_radius)

    def toggle(self, index: int) -> None:
        """Selects or deselects a node, invalidating the last check."""
        round = self._active_round()
        self.selection.toggle(index)
        round.last_verdict = None
        self.ui.selection_changed(self, index)

    def click(self, x: float, y: float) -> int | None:
        """Toggles the node drawn at the given logical coordinates, if there is one.

        Returns:
            The toggled node.
        """
        self._active_round()
        index = hit_test(self.positions, x, y, self.node_radius)
        if index is not None:
            self.toggle(index)
        return index

    def verify(self) -> Verdict:
        """Checks whether the selection is a minimum dominating set."""
        round = self._active_round()
        verdict = verify(self.selection.frozen(), round.graph)
        round.last_verdict = verdict
        logger.info("Selection %s is %s.", sorted(verdict.selection), "correct" if verdict.correct else "incorrect")
        self.ui.verdict(self, verdict)
        return verdict

    def request_hint(self) -> int | None:
        """Reveals the size of the minimum dominating sets, once per round.

        Returns:
            The size if it was newly revealed, `None` if it already was earlier in this round.
        """
        size = reveal_hint(self._active_round())
        if size is not None:
            self.revealed_hint = size
            self.ui.hint(self, size)
        return size

    def resize(self, viewport: Viewport) -> None:
        """Recomputes the layout for a new viewport size, keeping the selection and the last verdict."""
        self.viewport = viewport
        if self.round is not None:
            self.positions = self._layout()
            self.ui.layout_changed(self)
