from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    OK = "ok"
    IO = "io"
    JSON_PARSE = "json_parse"
    JSON_SERIALIZE = "json_serialize"
    NOT_INITIALIZED = "not_initialized"


_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.OK: "Success",
    ErrorKind.IO: "I/O error",
    ErrorKind.JSON_PARSE: "JSON parse error",
    ErrorKind.JSON_SERIALIZE: "JSON serialize error",
    ErrorKind.NOT_INITIALIZED: "Not initialized",
}


def error_message(kind: ErrorKind) -> str:
    return _MESSAGES.get(kind, "Unknown error")


class VxCoreError(Exception):
    """
    Raised by the config core with a classified error kind.

    The underlying platform or json error, if any, is chained as __cause__.
    """

    def __init__(self, kind: ErrorKind, detail: str | None = None) -> None:
        self.kind = kind
        self.detail = detail
        msg = error_message(kind)
        super().__init__(f"{msg}: {detail}" if detail else msg)
