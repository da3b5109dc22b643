from setuptools import setup
from pathlib import Path

# Stolen from microsofts recommenders repository:
here = Path(__file__).absolute().parent
version_data = {}
with open(here.joinpath("domgame", "__init__.py"), "r") as f:
    exec(f.read(), version_data)
version = version_data.get("__version__", "0.0")

setup(
    name="domgame",
    version=version,
    packages=["domgame"],
    package_data={"domgame": ["data/*.json"]},
    entry_points={"console_scripts": ["domgame = domgame.cli:app"]},
    python_requires=">=3.11",
    install_requires=[
        "pydantic>=2.4",
        "anyio>=4.1",
        "requests>=2.31",
        "typer>=0.9",
        "rich>=13.3",
        "tomlkit>=0.12",
    ],
    extras_require={"dev": ["pytest"]},
    include_package_data=True,
)
