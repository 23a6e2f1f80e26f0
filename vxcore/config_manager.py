from __future__ import annotations

import copy
import json
import logging
import os
import stat
import tempfile
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from .config import VxCoreConfig, merge_patch
from .errors import ErrorKind, VxCoreError
from .paths import DirectoryResolver, default_resolver
from .session import JsonRecordCodec, NotebookRecordCodec, VxCoreSessionConfig

log = logging.getLogger(__name__)

CONFIG_FILE_NAME = "vxcore.json"
SESSION_FILE_NAME = "session.json"
PORTABLE_DIR_NAME = "config"
DEFAULT_DATA_DIR_NAME = "data"

_TEST_MODE = threading.Event()
if str(os.getenv("VXCORE_TEST_MODE", "")).strip().lower() in {"1", "true", "yes", "y", "on"}:
    _TEST_MODE.set()


def set_test_mode(enabled: bool) -> None:
    """
    Set the process-wide default used by ConfigManager(test_mode=None).

    The flag is only read when a manager is constructed, so set it once
    before the first manager is built. Existing managers are unaffected.
    """
    if enabled:
        _TEST_MODE.set()
    else:
        _TEST_MODE.clear()


def is_test_mode() -> bool:
    return _TEST_MODE.is_set()


def sandbox_dir() -> Path:
    return (Path(tempfile.gettempdir()) / "vxcore_test").resolve()


def _target_mode(path: Path) -> int:
    # Keep the mode of the file being replaced; new files get the umask default.
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        mask = os.umask(0)
        os.umask(mask)
        return 0o666 & ~mask


class ManagerState(Enum):
    CONSTRUCTED = "constructed"
    PATHS_RESOLVED = "paths_resolved"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class ResolvedPaths:
    executable_dir: Path | None
    app_data_dir: Path | None
    local_data_dir: Path | None


class ConfigManager:
    """
    Loads the layered vxcore configuration and the session state.

    Layers, lowest precedence first:
    - <executable_dir>/data/vxcore.json (packaged defaults)
    - <app_data_dir>/vxcore.json (user overrides)

    The session lives in <local_data_dir>/session.json and is decoded on its
    own, never merged with the config. Missing files are treated as empty.
    """

    def __init__(
        self,
        *,
        test_mode: bool | None = None,
        resolver: DirectoryResolver | None = None,
        record_codec: NotebookRecordCodec | None = None,
    ) -> None:
        self._state = ManagerState.CONSTRUCTED
        self._resolver = resolver or default_resolver()
        self._codec = record_codec or JsonRecordCodec()
        self._test_mode = is_test_mode() if test_mode is None else bool(test_mode)
        self._config = VxCoreConfig()
        self._session_config = VxCoreSessionConfig()
        self._paths = self._resolve_paths()
        self._state = ManagerState.PATHS_RESOLVED

    def _resolve_paths(self) -> ResolvedPaths:
        exe_dir = self._resolver.executable_dir()
        if self._test_mode:
            sandbox = sandbox_dir()
            log.info("test mode: using sandbox data dir %s", sandbox)
            return ResolvedPaths(exe_dir, sandbox, sandbox)

        if exe_dir is not None:
            portable = exe_dir / PORTABLE_DIR_NAME
            try:
                is_portable = portable.exists()
            except OSError:
                is_portable = False
            if is_portable:
                log.info("portable install: using data dir %s", portable)
                return ResolvedPaths(exe_dir, portable, portable)

        paths = ResolvedPaths(exe_dir, self._resolver.app_data_dir(), self._resolver.local_data_dir())
        log.debug(
            "resolved paths executable=%s app_data=%s local_data=%s",
            paths.executable_dir,
            paths.app_data_dir,
            paths.local_data_dir,
        )
        return paths

    @property
    def state(self) -> ManagerState:
        return self._state

    @property
    def test_mode(self) -> bool:
        return self._test_mode

    @property
    def record_codec(self) -> NotebookRecordCodec:
        return self._codec

    @property
    def paths(self) -> ResolvedPaths:
        return self._paths

    @property
    def app_data_path(self) -> Path | None:
        return self._paths.app_data_dir

    @property
    def local_data_path(self) -> Path | None:
        return self._paths.local_data_dir

    @property
    def default_config_path(self) -> Path | None:
        if self._paths.executable_dir is None:
            return None
        return self._paths.executable_dir / DEFAULT_DATA_DIR_NAME / CONFIG_FILE_NAME

    @property
    def config_path(self) -> Path | None:
        if self._paths.app_data_dir is None:
            return None
        return self._paths.app_data_dir / CONFIG_FILE_NAME

    @property
    def session_config_path(self) -> Path | None:
        if self._paths.local_data_dir is None:
            return None
        return self._paths.local_data_dir / SESSION_FILE_NAME

    @property
    def config(self) -> VxCoreConfig:
        return self._config

    @property
    def session_config(self) -> VxCoreSessionConfig:
        # Mutable on purpose: callers edit in place, then save_session_config().
        return self._session_config

    def session_snapshot(self) -> VxCoreSessionConfig:
        return copy.deepcopy(self._session_config)

    def load_configs(self) -> None:
        """
        Create the data dirs, read the three documents, merge and decode.

        Raises VxCoreError on the first failure; the in-memory config and
        session keep their previous values in that case.
        """
        try:
            self._ensure_data_folders()
            self._check_and_migrate_version()
            default_json = self._load_json_file(self.default_config_path)
            user_json = self._load_json_file(self.config_path)
            session_json = self._load_json_file(self.session_config_path)
            try:
                config = VxCoreConfig.from_dict(merge_patch(default_json, user_json))
                session = VxCoreSessionConfig.from_dict(session_json, self._codec)
            except RecursionError as e:
                raise VxCoreError(ErrorKind.JSON_PARSE, "document nested too deeply") from e
        except VxCoreError as e:
            self._state = ManagerState.FAILED
            log.warning("config load failed: %s", e)
            raise

        self._config = config
        self._session_config = session
        self._state = ManagerState.READY
        log.debug(
            "configs loaded version=%s backends=%s notebooks=%d",
            self._config.version,
            self._config.search.backends,
            len(self._session_config.notebooks),
        )

    def _ensure_data_folders(self) -> None:
        for p in (self._paths.app_data_dir, self._paths.local_data_dir):
            if p is None:
                continue
            try:
                p.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise VxCoreError(ErrorKind.IO, f"cannot create directory {p}") from e

    def _check_and_migrate_version(self) -> None:
        """Reserved for migrating persisted files written by another config version."""
        return None

    def _load_json_file(self, path: Path | None) -> dict[str, Any]:
        if path is None:
            return {}
        try:
            text = path.read_text(encoding="utf-8")
        except (FileNotFoundError, NotADirectoryError):
            log.debug("config layer missing, using empty document: %s", path)
            return {}
        except UnicodeDecodeError as e:
            raise VxCoreError(ErrorKind.JSON_PARSE, f"{path}: {e}") from e
        except OSError as e:
            raise VxCoreError(ErrorKind.IO, f"cannot read {path}") from e
        try:
            obj = json.loads(text)
        except (json.JSONDecodeError, RecursionError) as e:
            raise VxCoreError(ErrorKind.JSON_PARSE, f"{path}: {e}") from e
        if not isinstance(obj, dict):
            log.warning("ignoring %s: top-level JSON value is not an object", path)
            return {}
        return obj

    def save_session_config(self) -> None:
        """
        Write the session to <local_data_dir>/session.json.

        The document goes to a temp file in the same directory first and is
        then renamed over the target, so a crash never leaves a partial file.
        """
        path = self.session_config_path
        if path is None:
            raise VxCoreError(ErrorKind.NOT_INITIALIZED, "local data path is not resolved")

        try:
            text = json.dumps(self._session_config.to_dict(self._codec), indent=2)
        except (TypeError, ValueError) as e:
            raise VxCoreError(ErrorKind.JSON_SERIALIZE, str(e)) from e

        tmp_name: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=str(path.parent),
                prefix=".session.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(text + "\n")
                tmp.flush()
                os.fsync(tmp.fileno())
            os.chmod(tmp_name, _target_mode(path))
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
            raise VxCoreError(ErrorKind.IO, f"cannot write {path}") from e
        log.debug("session saved: %s (%d notebooks)", path, len(self._session_config.notebooks))
