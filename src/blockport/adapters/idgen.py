import secrets
import string

from ..core.ports import KeyGenerator

_ALPHABET = string.ascii_lowercase + string.digits


class RandomKeys(KeyGenerator):
    """Random base-36 keys. Collisions are tolerated: keys are document-scoped."""

    def __init__(self, length: int = 12):
        self.length = length

    def new_key(self) -> str:
        return "".join(secrets.choice(_ALPHABET) for _ in range(self.length))


class SequenceKeys(KeyGenerator):
    """Deterministic counter keys (k1, k2, ...) for reproducible trees."""

    def __init__(self, prefix: str = "k"):
        self.prefix = prefix
        self.count = 0

    def new_key(self) -> str:
        self.count += 1
        return f"{self.prefix}{self.count}"


def get_key_generator(strategy: str, length: int = 12) -> RandomKeys | SequenceKeys:
    """Factory function to get a key generator based on strategy."""
    if strategy == "random":
        return RandomKeys(length=length)
    elif strategy == "sequence":
        return SequenceKeys()
    else:
        raise ValueError(f"Unknown key strategy: {strategy}")
