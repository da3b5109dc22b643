"""Creates the config objects."""
from pathlib import Path
import tomllib
from typing import Annotated, Self

from pydantic import Field, ValidationInfo, field_validator

from domgame.dataset import is_url
from domgame.layout import Viewport
from domgame.util import BaseModel


Positive = Annotated[float, Field(gt=0)]

BUNDLED_CATALOG = Path(__file__).parent / "data" / "graphs.json"
"""Catalog shipped with the package."""


class DatasetConfig(BaseModel):
    """Where the graph catalog is loaded from."""

    source: str = str(BUNDLED_CATALOG)
    """Path or http(s) url of the catalog, defaults to the one shipped with the package.

    Relative paths are resolved against the folder containing the config file.
    """
    timeout: Positive | None = 10
    """Seconds after which loading the catalog is given up."""

    @field_validator("source")
    @classmethod
    def _relativize(cls, value: str, info: ValidationInfo) -> str:
        if is_url(value) or info.context is None or "base_path" not in info.context:
            return value
        path = Path(value)
        if path.is_absolute():
            return value
        return str(info.context["base_path"] / path)


class DisplayConfig(BaseModel):
    """Settings of the drawing surface."""

    width: Positive = 640
    """Logical width of the viewport."""
    height: Positive = 384
    """Logical height of the viewport."""
    pixel_ratio: Positive = 1
    """Device pixels per logical unit."""
    node_radius: Positive = 15
    """Radius nodes are drawn with, in logical units."""
    cell_width: Positive = 8
    """Logical width of a terminal cell."""
    cell_height: Positive = 16
    """Logical height of a terminal cell."""

    @property
    def viewport(self) -> Viewport:
        """The configured viewport."""
        return Viewport(self.width, self.height, self.pixel_ratio)


class AnimationConfig(BaseModel):
    """Settings of the pop played when toggling a node."""

    frames: Annotated[int, Field(ge=0)] = 10
    amplitude: Annotated[float, Field(ge=0)] = 0.18
    fps: Positive = 60

    @property
    def frame_interval(self) -> float:
        """Seconds between two frames."""
        return 1 / self.fps


class GameSettings(BaseModel):
    """Settings of the game itself."""

    seed: int | None = None
    """Seed used to pick graphs, `None` picks them unpredictably."""


class GameConfig(BaseModel):
    """Base that contains all config options and can be parsed from config files."""

    # funky default to force its validation with the base path present
    dataset: DatasetConfig = Field(default_factory=dict, validate_default=True)
    display: DisplayConfig = DisplayConfig()
    animation: AnimationConfig = AnimationConfig()
    game: GameSettings = GameSettings()

    @classmethod
    def from_file(cls, file: Path) -> Self:
        """Parses a config object from a toml file.

        If the file doesn't exist it returns a default instance instead of raising an error.
        """
        if not file.is_file():
            config_dict = {}
        else:
            with open(file, "rb") as f:
                try:
                    config_dict = tomllib.load(f)
                except tomllib.TOMLDecodeError as e:
                    raise ValueError(f"The config file at {file} is not a properly formatted TOML file!\n{e}")
        return cls.model_validate(config_dict, context={"base_path": file.parent})
