"""Configuration loader for blockport.toml."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

CONFIG_FILENAME = "blockport.toml"


@dataclass
class KeysConfig:
    """Key generation configuration."""
    strategy: str = "random"  # "random" | "sequence"
    length: int = 12


@dataclass
class ImportConfig:
    """Limits applied when importing markdown."""
    max_bytes: int = 5 * 1024 * 1024
    max_title: int = 200
    max_excerpt: int = 500


@dataclass
class TagsConfig:
    """Tag normalization configuration."""
    acronyms: list[str] = field(default_factory=list)


@dataclass
class LoggingConfig:
    """Logging configuration for the CLI."""
    level: str = "WARNING"


@dataclass
class BlockportConfig:
    """Complete blockport configuration."""
    keys: KeysConfig = field(default_factory=KeysConfig)
    import_: ImportConfig = field(default_factory=ImportConfig)
    tags: TagsConfig = field(default_factory=TagsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: Path | None = None) -> BlockportConfig:
    """
    Load configuration from blockport.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/blockport.toml

    Args:
        config_path: Explicit path to config file

    Returns:
        BlockportConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_FILENAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    keys_data = toml_data.get("keys", {})
    keys_config = KeysConfig(
        strategy=keys_data.get("strategy", "random"),
        length=keys_data.get("length", 12),
    )

    import_data = toml_data.get("import", {})
    defaults = ImportConfig()
    import_config = ImportConfig(
        max_bytes=import_data.get("max_bytes", defaults.max_bytes),
        max_title=import_data.get("max_title", defaults.max_title),
        max_excerpt=import_data.get("max_excerpt", defaults.max_excerpt),
    )

    tags_data = toml_data.get("tags", {})
    tags_config = TagsConfig(acronyms=list(tags_data.get("acronyms", [])))

    logging_data = toml_data.get("logging", {})
    logging_config = LoggingConfig(level=str(logging_data.get("level", "WARNING")).upper())

    return BlockportConfig(
        keys=keys_config,
        import_=import_config,
        tags=tags_config,
        logging=logging_config,
    )
