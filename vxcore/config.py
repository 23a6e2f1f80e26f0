from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

DEFAULT_VERSION = "0.1.0"


def _default_backends() -> list[str]:
    return ["rg", "simple"]


def merge_patch(target: dict[str, Any], patch: dict[str, Any]) -> dict[str, Any]:
    """
    Overlay `patch` onto a copy of `target` (JSON merge patch, RFC 7396).

    Nested objects merge key by key; any other value, lists included,
    replaces the target value wholesale. A null in `patch` removes the key.
    """
    out = copy.deepcopy(target) if isinstance(target, dict) else {}
    for k, v in patch.items():
        if v is None:
            out.pop(k, None)
        elif isinstance(v, dict):
            out[k] = merge_patch(out.get(k) if isinstance(out.get(k), dict) else {}, v)
        else:
            out[k] = copy.deepcopy(v)
    return out


@dataclass(frozen=True)
class SearchConfig:
    backends: list[str] = field(default_factory=_default_backends)

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "SearchConfig":
        backends = d.get("backends")
        if not isinstance(backends, list):
            return SearchConfig()
        return SearchConfig(backends=[x for x in backends if isinstance(x, str)])

    def to_dict(self) -> dict[str, Any]:
        return {"backends": list(self.backends)}


@dataclass(frozen=True)
class VxCoreConfig:
    version: str = DEFAULT_VERSION
    search: SearchConfig = field(default_factory=SearchConfig)

    @staticmethod
    def from_dict(d: Any) -> "VxCoreConfig":
        # Each field falls back to its own default on absence or a type mismatch.
        if not isinstance(d, dict):
            return VxCoreConfig()
        version = d.get("version")
        search = d.get("search")
        return VxCoreConfig(
            version=(version if isinstance(version, str) else DEFAULT_VERSION),
            search=(SearchConfig.from_dict(search) if isinstance(search, dict) else SearchConfig()),
        )

    def to_dict(self) -> dict[str, Any]:
        # Keys outside the known schema are not carried over.
        return {
            "version": self.version,
            "search": self.search.to_dict(),
        }
