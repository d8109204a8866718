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
Helpers shared by the platform builds.

This module holds the command line flags common to every platform command,
the creation of the per-architecture container images, the invocation of
the fyne packaging tool, and the target directory housekeeping done around
each build.
"""

import argparse
import base64
import os
import shutil
from typing import Iterable, List

from fycross.build_scripts.build_catalog import OS_ENV_KEY, catalog_entry
from fycross.build_scripts.build_context import BuildContext
from fycross.build_scripts.build_errors import PrepareError, RelocateError
from fycross.build_scripts.build_volume import join_path_container, join_path_host
from fycross.dockers.container_engine import ContainerEngine, ContainerImage, RunOptions
from fycross.utils.log import log_util

# Name of the icon copied into the staging dir of every image
ICON_NAME = "Icon.png"

# 1x1 transparent PNG used when the project ships no icon
DEFAULT_ICON_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

FYNE_PACKAGE = "package"
FYNE_RELEASE = "release"


def add_common_flags(parser: argparse.ArgumentParser):
    """Add the flags shared by every platform command to parser."""
    parser.add_argument(
        "package",
        nargs="?",
        default=".",
        help="package dir to build, relative to --dir (default: .)",
    )
    parser.add_argument("--app-build", type=int, default=None, help="build number, must be greater than 0 (default: 1)")
    parser.add_argument("--app-id", default=None, help="application ID used for distribution")
    parser.add_argument("--app-version", default=None, help="version number in the form x.y.z (default: 1.0.0)")
    parser.add_argument("--cache", default=None, help="host dir mounted as the Go cache (default: ~/.cache/fycross)")
    parser.add_argument("--no-cache", action="store_true", help="do not mount a Go cache dir")
    parser.add_argument("--debug", action="store_true", help="show debug output")
    parser.add_argument("--dir", default=None, help="work dir mounted into the container (default: current dir)")
    parser.add_argument("--engine", default=None, help="container engine: docker or podman (default: auto-detect)")
    parser.add_argument(
        "--env",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="extra environment variable for the build, can be repeated",
    )
    parser.add_argument("--icon", default=None, help="application icon, relative to the package dir (default: Icon.png)")
    parser.add_argument("--image", default=None, help="custom container image to use instead of the default one")
    parser.add_argument("--ldflags", default=None, help="additional flags passed to the Go linker")
    parser.add_argument("--name", default=None, help="application name (default: package dir name)")
    parser.add_argument("--pull", action="store_true", help="always pull the container image")
    parser.add_argument("--release", action="store_true", help="package in release mode instead of debug mode")
    parser.add_argument("--tags", default=None, help="comma separated list of build tags")
    parser.add_argument(
        "-j", "--jobs",
        type=int,
        default=1,
        help="number of architectures built in parallel (default: 1)",
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="build the remaining architectures after a failure and report all errors at the end",
    )


def override_image(ctx: BuildContext, default_image: str) -> str:
    return ctx.image or default_image


def goflags_ldflags(ldflags: str) -> str:
    """
    GOFLAGS entry for ldflags.

    go splits GOFLAGS on spaces unless a value is quoted, so a multi-word
    value is wrapped in the quote it does not contain.
    """
    quote = '"' if "'" in ldflags else "'"
    return f"-ldflags={quote}{ldflags}{quote}"


def setup_container_images(
    ctx: BuildContext, engine: ContainerEngine, archs: Iterable, target_os: str
) -> List[ContainerImage]:
    """
    Create one container image per architecture, loaded with its environment.

    User env comes first so the toolchain entries win over it; the target OS
    entry is set last.
    """
    images = []
    for arch in archs:
        entry = catalog_entry(target_os, arch)
        image = engine.create_container_image(arch, target_os, override_image(ctx, entry.image))
        for key, value in ctx.env:
            image.set_env(key, value)
        for key, value in entry.environment().items():
            image.set_env(key, value)
        image.set_env("CGO_ENABLED", "1")
        if ctx.ldflags:
            image.set_env("GOFLAGS", goflags_ldflags(ctx.ldflags))
        image.set_env(OS_ENV_KEY, target_os)
        images.append(image)
    return images


def icon_path_container(ctx: BuildContext, image: ContainerImage) -> str:
    return join_path_container(ctx.tmp_dir_container(), image.id(), ICON_NAME)


def prepare_icon(ctx: BuildContext, image: ContainerImage):
    """Copy the application icon into the staging dir of image."""
    icon_host = ctx.icon_host()
    dst = join_path_host(ctx.tmp_dir_host(), image.id(), ICON_NAME)
    try:
        os.makedirs(os.path.dirname(dst), exist_ok=True)
        if os.path.isfile(icon_host):
            shutil.copyfile(icon_host, dst)
            return
        if not ctx.is_default_icon():
            raise PrepareError(f"icon not found at {icon_host}")
        log_util.warning(f"Default icon not found at {icon_host}, using a placeholder")
        with open(dst, "wb") as f:
            f.write(DEFAULT_ICON_PNG)
    except OSError as e:
        raise PrepareError(f"could not prepare the icon: {e}") from e


def fyne_command(ctx: BuildContext, image: ContainerImage, subcommand: str) -> List[str]:
    args = [
        "fyne", subcommand,
        "-os", image.os,
        "-name", ctx.name,
        "-icon", icon_path_container(ctx, image),
        "-appBuild", str(ctx.app_build),
        "-appVersion", ctx.app_version,
    ]
    if ctx.app_id:
        args.extend(["-appID", ctx.app_id])
    if ctx.tags:
        args.extend(["-tags", ",".join(ctx.tags)])
    return args


def fyne_package(ctx: BuildContext, image: ContainerImage) -> str:
    """Package the app in debug mode, in the package dir of the container."""
    args = fyne_command(ctx, image, FYNE_PACKAGE)
    return image.run(ctx.volume, RunOptions(work_dir=ctx.work_dir_container()), args)


def fyne_release(ctx: BuildContext, image: ContainerImage) -> str:
    """Package the app in release mode, in the package dir of the container."""
    args = fyne_command(ctx, image, FYNE_RELEASE)
    return image.run(ctx.volume, RunOptions(work_dir=ctx.work_dir_container()), args)


def target_dirs_host(ctx: BuildContext, image: ContainerImage) -> List[str]:
    return [
        join_path_host(ctx.bin_dir_host(), image.id()),
        join_path_host(ctx.dist_dir_host(), image.id()),
        join_path_host(ctx.tmp_dir_host(), image.id()),
    ]


def clean_target_dirs(ctx: BuildContext, image: ContainerImage):
    """Remove the outputs of a previous build of image and recreate its dirs."""
    try:
        for path in target_dirs_host(ctx, image):
            if os.path.exists(path):
                shutil.rmtree(path)
            os.makedirs(path)
    except OSError as e:
        raise PrepareError(f"could not clean the target dirs: {e}") from e


def copy_to_dist(ctx: BuildContext, image: ContainerImage, package_name: str) -> str:
    """Copy the staged package of image into its dist dir and return the new path."""
    src = join_path_host(ctx.tmp_dir_host(), image.id(), package_name)
    dst_dir = join_path_host(ctx.dist_dir_host(), image.id())
    try:
        os.makedirs(dst_dir, exist_ok=True)
        return shutil.copy2(src, join_path_host(dst_dir, package_name))
    except OSError as e:
        raise RelocateError(f"could not copy the package to {dst_dir}: {e}") from e


def format_elapsed_time(elapsed: float) -> str:
    """Format elapsed time in a human-readable format."""
    if elapsed < 60:
        return f"{elapsed:.1f}s"
    elif elapsed < 3600:
        minutes = int(elapsed // 60)
        seconds = elapsed % 60
        return f"{minutes}m {seconds:.0f}s"
    else:
        hours = int(elapsed // 3600)
        minutes = int((elapsed % 3600) // 60)
        return f"{hours}h {minutes}m"
