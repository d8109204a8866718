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
Linux build step.

Packages the app with the fyne tool inside the container image of one
architecture, stages the resulting tarball under tmp/<image id>/ and
extracts the executable into bin/<image id>/.

Output:
    - fycross/tmp/linux-<arch>/<name>.tar.xz
    - fycross/bin/linux-<arch>/<executable>
"""

import os
import threading

from fycross.build_scripts.build_context import BuildContext
from fycross.build_scripts.build_errors import (
    ContainerRunError,
    ExtractError,
    PackagingError,
    RelocateError,
)
from fycross.build_scripts.build_pipeline import PlatformBuilder
from fycross.build_scripts.build_utils import fyne_package, fyne_release, prepare_icon
from fycross.build_scripts.build_volume import join_path_container, join_path_host
from fycross.dockers.container_engine import ContainerImage, RunOptions
from fycross.utils.log import log_util

LINUX_PACKAGE_EXT = ".tar.xz"

# The fyne tarball installs the executable under usr/local/bin
ARCHIVE_BIN_DIR = "usr/local/bin"
ARCHIVE_STRIP_COMPONENTS = 3

# fyne writes <name>.tar.xz into the shared work dir, so packaging and
# relocation of one work dir run one target at a time
_work_dir_locks = {}
_work_dir_locks_guard = threading.Lock()


def linux_package_name(ctx: BuildContext) -> str:
    return f"{ctx.name}{LINUX_PACKAGE_EXT}"


def work_dir_lock(work_dir: str) -> threading.Lock:
    with _work_dir_locks_guard:
        return _work_dir_locks.setdefault(work_dir, threading.Lock())


class LinuxBuilder(PlatformBuilder):
    def __init__(self, ctx: BuildContext):
        self.ctx = ctx

    def build(self, image: ContainerImage) -> str:
        ctx = self.ctx
        prepare_icon(ctx, image)

        package_name = linux_package_name(ctx)
        staged = join_path_container(ctx.tmp_dir_container(), image.id(), package_name)
        with work_dir_lock(ctx.work_dir_host()):
            log_util.info("[i] Packaging app...")
            try:
                if ctx.release:
                    fyne_release(ctx, image)
                else:
                    fyne_package(ctx, image)
            except ContainerRunError as e:
                raise PackagingError(f"could not package the Fyne app: {e}") from e
            if not os.path.isfile(join_path_host(ctx.work_dir_host(), package_name)):
                raise PackagingError(f"could not package the Fyne app: {package_name} was not created")

            try:
                image.run(ctx.volume, RunOptions(), [
                    "mv",
                    join_path_container(ctx.work_dir_container(), package_name),
                    staged,
                ])
            except ContainerRunError as e:
                raise RelocateError(f"could not move the package to {staged}: {e}") from e

        # Extract the resulting executable from the tarball
        bin_dir = join_path_container(ctx.bin_dir_container(), image.id())
        try:
            image.run(ctx.volume, RunOptions(work_dir=bin_dir), [
                "tar", "-xf", staged,
                f"--strip-components={ARCHIVE_STRIP_COMPONENTS}",
                ARCHIVE_BIN_DIR,
            ])
        except ContainerRunError as e:
            raise ExtractError(f"could not extract the executable into {bin_dir}: {e}") from e

        return package_name
