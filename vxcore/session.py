from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Protocol


class NotebookRecordCodec(Protocol):
    def decode(self, value: Any) -> Any: ...

    def encode(self, record: Any) -> Any: ...


class JsonRecordCodec:
    """Keeps notebook records as their raw JSON values."""

    def decode(self, value: Any) -> Any:
        return copy.deepcopy(value)

    def encode(self, record: Any) -> Any:
        return copy.deepcopy(record)


@dataclass
class VxCoreSessionConfig:
    notebooks: list[Any] = field(default_factory=list)

    @staticmethod
    def from_dict(d: Any, codec: NotebookRecordCodec | None = None) -> "VxCoreSessionConfig":
        c = codec or JsonRecordCodec()
        notebooks = d.get("notebooks") if isinstance(d, dict) else None
        if not isinstance(notebooks, list):
            return VxCoreSessionConfig()
        return VxCoreSessionConfig(notebooks=[c.decode(x) for x in notebooks])

    def to_dict(self, codec: NotebookRecordCodec | None = None) -> dict[str, Any]:
        c = codec or JsonRecordCodec()
        return {"notebooks": [c.encode(r) for r in self.notebooks]}
