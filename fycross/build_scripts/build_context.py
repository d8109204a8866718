#
# Copyright 2024 fycross Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

"""
Build context: the resolved, read-only configuration of one invocation.

The context is made once from the parsed command line flags and the
optional FyneApp.toml metadata file of the package, then handed to every
component that needs it.

FyneApp.toml example:

    [Details]
    Icon = "Icon.png"
    Name = "My App"
    ID = "com.example.myapp"
    Version = "1.0.0"
    Build = 1
"""

import os
import posixpath
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from fycross.build_scripts.build_errors import ContextCreationError
from fycross.build_scripts.build_volume import (
    Volume,
    join_path_container,
    join_path_host,
    make_volume,
)

METADATA_FILE_NAME = "FyneApp.toml"
DEFAULT_ICON_NAME = "Icon.png"
DEFAULT_APP_VERSION = "1.0.0"
DEFAULT_APP_BUILD = 1


@dataclass(frozen=True)
class BuildContext:
    name: str
    volume: Volume
    release: bool = False
    package: str = "."
    app_id: str = ""
    app_version: str = DEFAULT_APP_VERSION
    app_build: int = DEFAULT_APP_BUILD
    icon: str = DEFAULT_ICON_NAME
    tags: Tuple[str, ...] = ()
    ldflags: str = ""
    env: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)
    debug: bool = False
    pull: bool = False
    image: Optional[str] = None
    engine: Optional[str] = None

    def work_dir_host(self) -> str:
        return os.path.normpath(join_path_host(self.volume.work_dir_host, self.package))

    def work_dir_container(self) -> str:
        return posixpath.normpath(join_path_container(self.volume.work_dir_container(), self.package))

    def bin_dir_host(self) -> str:
        return self.volume.bin_dir_host()

    def bin_dir_container(self) -> str:
        return self.volume.bin_dir_container()

    def dist_dir_host(self) -> str:
        return self.volume.dist_dir_host()

    def dist_dir_container(self) -> str:
        return self.volume.dist_dir_container()

    def tmp_dir_host(self) -> str:
        return self.volume.tmp_dir_host()

    def tmp_dir_container(self) -> str:
        return self.volume.tmp_dir_container()

    def icon_host(self) -> str:
        if os.path.isabs(self.icon):
            return self.icon
        return join_path_host(self.work_dir_host(), self.icon)

    def is_default_icon(self) -> bool:
        return self.icon == DEFAULT_ICON_NAME


def load_app_metadata(package_dir: str) -> Dict[str, Any]:
    """
    Read the [Details] table of FyneApp.toml in package_dir.

    Returns an empty dict when the file does not exist.
    """
    path = os.path.join(package_dir, METADATA_FILE_NAME)
    if not os.path.isfile(path):
        return {}
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ContextCreationError(f"could not read {path}: {e}") from e
    details = data.get("Details", {})
    if not isinstance(details, dict):
        raise ContextCreationError(f"invalid [Details] table in {path}")
    return details


def parse_env_flags(values) -> Tuple[Tuple[str, str], ...]:
    env = {}
    for value in values or []:
        key, sep, val = value.partition("=")
        if not sep or not key.strip():
            raise ContextCreationError(f"invalid env {value!r}, expected KEY=VALUE")
        env[key.strip()] = val
    return tuple(env.items())


def parse_tags(value) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    return tuple(tag.strip() for tag in value if tag.strip())


def _app_build(value) -> int:
    try:
        build = int(value)
    except (TypeError, ValueError):
        raise ContextCreationError(f"build number must be an integer, got {value!r}")
    if build <= 0:
        raise ContextCreationError(f"build number must be greater than zero, got {build}")
    return build


def make_default_context(flags, package: str = ".") -> BuildContext:
    """
    Create the build context from the parsed common flags.

    Flags left unset fall back to the FyneApp.toml metadata of the package
    and then to the built-in defaults.

    Raises:
        ContextCreationError: the directories or flag values are invalid
    """
    volume = make_volume(
        getattr(flags, "dir", None) or os.getcwd(),
        cache_dir=getattr(flags, "cache", None),
        no_cache=getattr(flags, "no_cache", False),
    )

    package = posixpath.normpath((package or ".").replace(os.sep, "/"))
    if posixpath.isabs(package) or package == ".." or package.startswith("../"):
        raise ContextCreationError(f"package {package!r} must be inside the work dir {volume.work_dir_host}")
    package_dir = os.path.normpath(join_path_host(volume.work_dir_host, package))
    if not os.path.isdir(package_dir):
        raise ContextCreationError(f"package dir not found: {package_dir}")

    metadata = load_app_metadata(package_dir)

    name = getattr(flags, "name", None) or metadata.get("Name") or os.path.basename(package_dir)
    app_build = getattr(flags, "app_build", None)
    if app_build is None:
        app_build = metadata.get("Build", DEFAULT_APP_BUILD)

    return BuildContext(
        name=str(name),
        volume=volume,
        release=bool(getattr(flags, "release", False)),
        package=package,
        app_id=getattr(flags, "app_id", None) or str(metadata.get("ID", "")),
        app_version=getattr(flags, "app_version", None) or str(metadata.get("Version", DEFAULT_APP_VERSION)),
        app_build=_app_build(app_build),
        icon=getattr(flags, "icon", None) or str(metadata.get("Icon", DEFAULT_ICON_NAME)),
        tags=parse_tags(getattr(flags, "tags", None)),
        ldflags=getattr(flags, "ldflags", None) or "",
        env=parse_env_flags(getattr(flags, "env", None)),
        debug=bool(getattr(flags, "debug", False)),
        pull=bool(getattr(flags, "pull", False)),
        image=getattr(flags, "image", None) or None,
        engine=getattr(flags, "engine", None) or None,
    )
