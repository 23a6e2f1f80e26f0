from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

log = logging.getLogger(__name__)

APP_NAME = "VNote"


def _env_dir(name: str) -> Path | None:
    v = os.getenv(name)
    if v and v.strip():
        return Path(v.strip()).expanduser()
    return None


def home_dir() -> Path | None:
    """
    $HOME first, then the current user's record in the account database.
    Returns None when neither is available.
    """
    home = _env_dir("HOME")
    if home is not None:
        return home
    try:
        import pwd

        return Path(pwd.getpwuid(os.getuid()).pw_dir)
    except (ImportError, KeyError, AttributeError):
        return None


def _absolute(p: Path | None) -> Path | None:
    if p is None:
        return None
    try:
        return p.resolve()
    except (OSError, RuntimeError):
        return p.absolute()


class DirectoryResolver:
    """
    Computes the executable, app-data and local-data directories.

    Queries never raise; an unresolvable directory is reported as None.
    """

    def __init__(self, app_name: str = APP_NAME) -> None:
        self.app_name = app_name

    def app_data_dir(self) -> Path | None:
        raise NotImplementedError

    def local_data_dir(self) -> Path | None:
        raise NotImplementedError

    def executable_dir(self) -> Path | None:
        # Frozen bundles sit next to their binary; source installs use the package dir.
        override = _env_dir("VXCORE_EXECUTABLE_DIR")
        if override is not None:
            return _absolute(override)
        if getattr(sys, "frozen", False):
            if not sys.executable:
                return None
            return _absolute(Path(sys.executable)).parent
        return _absolute(Path(__file__)).parent


class WindowsDirectoryResolver(DirectoryResolver):
    def _known_folder(self, *, roaming: bool) -> Path | None:
        from platformdirs import user_data_dir

        try:
            return _absolute(Path(user_data_dir(self.app_name, appauthor=False, roaming=roaming)))
        except Exception as e:
            log.warning("known folder lookup failed roaming=%s: %s", roaming, e)
            return None

    def app_data_dir(self) -> Path | None:
        return self._known_folder(roaming=True)

    def local_data_dir(self) -> Path | None:
        return self._known_folder(roaming=False)


class MacDirectoryResolver(DirectoryResolver):
    def app_data_dir(self) -> Path | None:
        home = home_dir()
        if home is None:
            return None
        return _absolute(home / "Library" / "Application Support" / self.app_name)

    def local_data_dir(self) -> Path | None:
        home = home_dir()
        if home is None:
            return None
        return _absolute(home / "Library" / "Caches" / self.app_name)


class UnixDirectoryResolver(DirectoryResolver):
    def _xdg_dir(self, env_name: str, *fallback: str) -> Path | None:
        base = _env_dir(env_name)
        if base is None:
            home = home_dir()
            if home is None:
                return None
            base = home.joinpath(*fallback)
        return _absolute(base / self.app_name)

    def app_data_dir(self) -> Path | None:
        return self._xdg_dir("XDG_DATA_HOME", ".local", "share")

    def local_data_dir(self) -> Path | None:
        return self._xdg_dir("XDG_CACHE_HOME", ".cache")


def default_resolver(app_name: str = APP_NAME, platform: str | None = None) -> DirectoryResolver:
    plat = platform or sys.platform
    if plat.startswith("win"):
        cls: type[DirectoryResolver] = WindowsDirectoryResolver
    elif plat == "darwin":
        cls = MacDirectoryResolver
    else:
        cls = UnixDirectoryResolver
    log.debug("directory resolver platform=%s resolver=%s", plat, cls.__name__)
    return cls(app_name)
