"""Configuration loading and validation.

Loads ``settings.toml`` and validates all fields at startup, before the
dataset is read or any ranking is computed.

The validated config is exposed as a :class:`Settings` dataclass with
typed fields for each section: ``dataset``, ``population``, ``output``,
and ``logging``.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from langrank.errors import ActionableError

# Entity types that are tracked in the dataset but are not languages.
DEFAULT_NON_LANGUAGE_TYPES: tuple[str, ...] = (
    "application",
    "binaryDataFormat",
    "characterEncoding",
    "compiler",
    "editor",
    "feature",
    "filesystem",
    "framework",
    "ide",
    "library",
    "linter",
    "os",
    "packageManager",
    "plugin",
    "protocol",
    "standard",
    "vm",
    "webApi",
)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# ---------------------------------------------------------------------------
# Config dataclasses
# ---------------------------------------------------------------------------


@dataclass
class DatasetConfig:
    """Entity source from ``[dataset]``."""

    path: str


@dataclass
class PopulationConfig:
    """Sub-population rules from ``[population]``."""

    non_language_types: list[str] = field(
        default_factory=lambda: list(DEFAULT_NON_LANGUAGE_TYPES)
    )


@dataclass
class OutputConfig:
    """Output settings from ``[output]``."""

    output_dir: str = "./output"
    top_n: int = 20


@dataclass
class LoggingConfig:
    """Logging settings from ``[logging]``."""

    log_dir: str = "data/logs"
    level: str = "INFO"
    file_logging: bool = False

    @property
    def level_number(self) -> int:
        return logging.getLevelName(self.level)  # type: ignore[no-any-return]


@dataclass
class Settings:
    """Top-level validated configuration."""

    dataset: DatasetConfig
    population: PopulationConfig = field(default_factory=PopulationConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# ---------------------------------------------------------------------------
# Default settings path
# ---------------------------------------------------------------------------

DEFAULT_SETTINGS_PATH = Path("config/settings.toml")


# ---------------------------------------------------------------------------
# Loading and validation
# ---------------------------------------------------------------------------


def load_settings(path: str | Path = DEFAULT_SETTINGS_PATH) -> Settings:
    """Load and validate settings from a TOML file.

    Raises :class:`~langrank.errors.ActionableError`:
      - CONFIG if the file is missing or a required field is absent
      - VALIDATION if field values are out of range
      - PARSE if the TOML is malformed

    Returns a fully validated :class:`Settings` instance.
    """
    filepath = Path(path)
    if not filepath.exists():
        raise ActionableError.config(
            field_name="settings_path",
            reason=f"Settings file not found: {filepath}",
            suggestion=f"Create {filepath} or pass --settings with the right path",
        )

    raw_text = filepath.read_text(encoding="utf-8")
    try:
        data = tomllib.loads(raw_text)
    except tomllib.TOMLDecodeError as exc:
        raise ActionableError.parse(
            source=str(filepath),
            raw_error=str(exc),
            suggestion=f"Fix TOML syntax in {filepath}",
        ) from None

    return _validate(data, filepath)


def _validate(data: dict[str, object], filepath: Path) -> Settings:
    """Validate raw TOML data and return a Settings instance."""

    # -- dataset section -----------------------------------------------------
    dataset_section = _require_section(data, "dataset", filepath)
    dataset_path = _require_field(dataset_section, "path", "dataset", filepath)
    if not isinstance(dataset_path, str) or not dataset_path.strip():
        raise ActionableError.config(
            field_name="dataset.path",
            reason="dataset.path must be a non-empty string",
            suggestion="Point [dataset].path at the directory of entity files",
        )

    # -- population section --------------------------------------------------
    population_data = _optional_section(data, "population")
    non_language_types = population_data.get(
        "non_language_types", list(DEFAULT_NON_LANGUAGE_TYPES)
    )
    if not isinstance(non_language_types, list) or not all(
        isinstance(t, str) for t in non_language_types
    ):
        raise ActionableError.validation(
            field_name="population.non_language_types",
            reason="must be a list of type names",
            suggestion='Set [population].non_language_types = ["library", "editor", ...]',
        )

    # -- output section ------------------------------------------------------
    output_data = _optional_section(data, "output")
    top_n = output_data.get("top_n", 20)
    if not isinstance(top_n, int) or isinstance(top_n, bool) or top_n <= 0:
        raise ActionableError.validation(
            field_name="output.top_n",
            reason=f"is {top_n!r} — must be an integer > 0",
            suggestion="Set [output].top_n to a positive number",
        )
    output = OutputConfig(
        output_dir=str(output_data.get("output_dir", "./output")),
        top_n=top_n,
    )

    # -- logging section -----------------------------------------------------
    logging_data = _optional_section(data, "logging")
    level = str(logging_data.get("level", "INFO")).upper()
    if level not in _LOG_LEVELS:
        raise ActionableError.validation(
            field_name="logging.level",
            reason=f"'{level}' is not one of {', '.join(_LOG_LEVELS)}",
            suggestion="Set [logging].level to INFO or DEBUG",
        )
    logging_config = LoggingConfig(
        log_dir=str(logging_data.get("log_dir", "data/logs")),
        level=level,
        file_logging=bool(logging_data.get("file_logging", False)),
    )

    return Settings(
        dataset=DatasetConfig(path=dataset_path),
        population=PopulationConfig(non_language_types=list(non_language_types)),
        output=output,
        logging=logging_config,
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _require_section(data: dict[str, object], name: str, filepath: Path) -> dict[str, object]:
    """Return a required top-level section, or raise CONFIG error."""
    section = data.get(name)
    if section is None or not isinstance(section, dict):
        raise ActionableError.config(
            field_name=name,
            reason=f"Required section [{name}] is missing from {filepath}",
            suggestion=f"Add a [{name}] section to {filepath}",
        )
    return section


def _optional_section(data: dict[str, object], name: str) -> dict[str, object]:
    """Return an optional top-level section, or an empty dict."""
    section = data.get(name, {})
    if not isinstance(section, dict):
        return {}
    return section


def _require_field(
    section: dict[str, object], field_name: str, section_name: str, filepath: Path
) -> object:
    """Return a required field within a section, or raise CONFIG error."""
    value = section.get(field_name)
    if value is None:
        raise ActionableError.config(
            field_name=f"{section_name}.{field_name}",
            reason=f"Required field '{field_name}' is missing from [{section_name}] in {filepath}",
            suggestion=f"Add '{field_name}' to the [{section_name}] section in {filepath}",
        )
    return value
