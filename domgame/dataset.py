"""Module providing access to the catalog of graphs."""
import logging
from pathlib import Path
from random import Random
from typing import Iterator, Sequence, Self

from anyio import fail_after
from anyio.to_thread import run_sync
from pydantic import TypeAdapter, ValidationError as PydanticValidationError
from requests import RequestException, get as http_get

from domgame.graph import GraphRecord
from domgame.util import DatasetError

logger = logging.getLogger("domgame.dataset")

_catalog_schema = TypeAdapter(list[GraphRecord])


class Dataset:
    """Immutable catalog of graph records the rounds are drawn from."""

    def __init__(self, records: Sequence[GraphRecord]) -> None:
        if not records:
            raise DatasetError("The graph catalog is empty.")
        self._records = tuple(records)

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, index: int) -> GraphRecord:
        return self._records[index]

    def __iter__(self) -> Iterator[GraphRecord]:
        return iter(self._records)

    def pick(self, previous: int | None, rng: Random) -> int:
        """Picks the index of the graph used for the next round.

        The choice is uniform among all graphs other than `previous`. If the catalog only contains a single graph it
        is reused.
        """
        if len(self) == 1:
            return 0
        if previous is None or not 0 <= previous < len(self):
            return rng.randrange(len(self))
        index = rng.randrange(len(self) - 1)
        return index if index < previous else index + 1

    @classmethod
    def parse(cls, data: str | bytes) -> Self:
        """Validates a json encoded catalog.

        Raises:
            DatasetError: If the data isn't a non-empty list of valid graph records.
        """
        try:
            records = _catalog_schema.validate_json(data)
        except PydanticValidationError as e:
            raise DatasetError("The graph catalog does not fit the schema.", detail=str(e))
        logger.info("Loaded a catalog of %d graphs.", len(records))
        return cls(records)

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Reads and validates the catalog stored at the given path."""
        try:
            data = path.read_bytes()
        except OSError as e:
            raise DatasetError("Could not read the graph catalog.", detail=str(e))
        return cls.parse(data)

    @classmethod
    def from_url(cls, url: str, timeout: float | None = None) -> Self:
        """Downloads and validates the catalog served at the given url."""
        try:
            response = http_get(url, timeout=timeout)
            response.raise_for_status()
        except RequestException as e:
            raise DatasetError("Could not download the graph catalog.", detail=str(e))
        return cls.parse(response.content)


def is_url(source: str | Path) -> bool:
    """Checks whether a dataset source refers to a remote resource."""
    return isinstance(source, str) and source.startswith(("http://", "https://"))


async def load_dataset(source: str | Path, timeout: float | None = None) -> Dataset:
    """Loads the catalog from a file path or a http(s) url without blocking the event loop.

    Args:
        source: Where to load the catalog from.
        timeout: Seconds after which loading is given up, `None` to wait indefinitely.

    Raises:
        DatasetError: If the catalog cannot be loaded for any reason, including running into the timeout.
    """
    logger.debug("Loading the graph catalog from %s", source)
    try:
        with fail_after(timeout):
            if is_url(source):
                return await run_sync(Dataset.from_url, str(source), timeout, abandon_on_cancel=True)
            else:
                return await run_sync(Dataset.from_file, Path(source), abandon_on_cancel=True)
    except TimeoutError:
        raise DatasetError("Loading the graph catalog timed out.", detail=f"Gave up after {timeout} seconds.")
