"""Runtime wiring helper for CLI applications."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.idgen import get_key_generator
from .config import BlockportConfig, load_config
from .core.ports import KeyGenerator


@dataclass
class Runtime:
    """Container for configuration-derived components."""
    config: BlockportConfig

    def new_keys(self) -> KeyGenerator:
        """A fresh key generator; one per conversion call."""
        return get_key_generator(self.config.keys.strategy, self.config.keys.length)


def build_runtime(config_path: Path | None = None) -> Runtime:
    """Load configuration and check it can produce key generators."""
    config = load_config(config_path=config_path)
    rt = Runtime(config=config)
    # Fail early on an unknown strategy rather than mid-conversion
    rt.new_keys()
    return rt
