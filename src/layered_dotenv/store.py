from __future__ import annotations

import os
from typing import Any, Iterator, MutableMapping, Optional

from layered_dotenv.normalize import to_env_string


class EnvStore:
    """Destination for every key loaded in a session.

    Writes go to a string mapping (the process environment unless another
    mapping is given). The typed value of each key written through this
    store is kept alongside, since the environment can only hold strings.
    """

    def __init__(self, backing: Optional[MutableMapping[str, str]] = None):
        self._backing: MutableMapping[str, str] = (
            os.environ if backing is None else backing
        )
        self._typed: dict[str, Any] = {}

    def set(self, key: str, value: Any) -> None:
        self._backing[key] = to_env_string(value)
        self._typed[key] = value

    def update(self, values: dict[str, Any]) -> None:
        for key, value in values.items():
            self.set(key, value)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._backing.get(key, default)

    def __getitem__(self, key: str) -> str:
        return self._backing[key]

    def __contains__(self, key: object) -> bool:
        return key in self._backing

    def __iter__(self) -> Iterator[str]:
        return iter(self._backing)

    def __len__(self) -> int:
        return len(self._backing)

    @property
    def typed(self) -> dict[str, Any]:
        """Values written in this session, before string conversion."""
        return dict(self._typed)

    def snapshot(self) -> dict[str, str]:
        return dict(self._backing)


def parse_profiles(value: Optional[str]) -> list[str]:
    """Split a comma-separated profile selector, dropping blank entries."""
    if value is None:
        return []
    return [name.strip() for name in value.split(",") if name.strip()]
