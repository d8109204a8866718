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
Mapping between host directories and the directories seen in a container.

The work dir is mounted at /app and the Go cache at /go. Build outputs live
under <work dir>/fycross/ so they are visible on both sides of the mount.
"""

import os
import posixpath
from dataclasses import dataclass
from typing import List, Optional, Tuple

from fycross.build_scripts.build_errors import ContextCreationError

WORK_DIR_CONTAINER = "/app"
CACHE_DIR_CONTAINER = "/go"

# Directory holding every fycross output, relative to the work dir
OUTPUT_DIR_NAME = "fycross"
BIN_DIR_NAME = "bin"
DIST_DIR_NAME = "dist"
TMP_DIR_NAME = "tmp"


def join_path_container(*parts) -> str:
    return posixpath.join(*[str(p) for p in parts])


def join_path_host(*parts) -> str:
    return os.path.join(*[str(p) for p in parts])


def default_cache_dir() -> str:
    return os.path.join(os.path.expanduser("~"), ".cache", OUTPUT_DIR_NAME)


@dataclass(frozen=True)
class Volume:
    work_dir_host: str
    cache_dir_host: Optional[str] = None

    def work_dir_container(self) -> str:
        return WORK_DIR_CONTAINER

    def cache_dir_container(self) -> str:
        return CACHE_DIR_CONTAINER

    def output_dir_host(self) -> str:
        return join_path_host(self.work_dir_host, OUTPUT_DIR_NAME)

    def output_dir_container(self) -> str:
        return join_path_container(WORK_DIR_CONTAINER, OUTPUT_DIR_NAME)

    def bin_dir_host(self) -> str:
        return join_path_host(self.output_dir_host(), BIN_DIR_NAME)

    def bin_dir_container(self) -> str:
        return join_path_container(self.output_dir_container(), BIN_DIR_NAME)

    def dist_dir_host(self) -> str:
        return join_path_host(self.output_dir_host(), DIST_DIR_NAME)

    def dist_dir_container(self) -> str:
        return join_path_container(self.output_dir_container(), DIST_DIR_NAME)

    def tmp_dir_host(self) -> str:
        return join_path_host(self.output_dir_host(), TMP_DIR_NAME)

    def tmp_dir_container(self) -> str:
        return join_path_container(self.output_dir_container(), TMP_DIR_NAME)

    def mounts(self) -> List[Tuple[str, str]]:
        """(host, container) pairs to bind mount, cache last."""
        mounts = [(self.work_dir_host, WORK_DIR_CONTAINER)]
        if self.cache_dir_host:
            mounts.append((self.cache_dir_host, CACHE_DIR_CONTAINER))
        return mounts


def make_volume(work_dir: str, cache_dir: Optional[str] = None, no_cache: bool = False) -> Volume:
    """
    Create the volume for a build rooted at work_dir.

    Raises:
        ContextCreationError: work_dir is not an existing directory or the
            cache dir cannot be created
    """
    work_dir = os.path.abspath(work_dir)
    if not os.path.isdir(work_dir):
        raise ContextCreationError(f"work dir not found: {work_dir}")
    if no_cache:
        return Volume(work_dir, None)
    cache_dir = os.path.abspath(cache_dir or default_cache_dir())
    # The engine mounts it at /go and the container user must be able to write it
    try:
        os.makedirs(cache_dir, exist_ok=True)
    except OSError as e:
        raise ContextCreationError(f"could not create the cache dir {cache_dir}: {e}") from e
    return Volume(work_dir, cache_dir)
