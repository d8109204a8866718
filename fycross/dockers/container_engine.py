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
Container engine support.

A ContainerEngine wraps the docker or podman binary. It creates one
ContainerImage per (OS, architecture) target; the image holds the
environment of that target and runs commands in a throwaway container
with the build volume mounted.
"""

import os
import shutil
from dataclasses import dataclass
from typing import Dict, List, Optional

from fycross.build_scripts.build_errors import ContainerRunError, EngineError
from fycross.build_scripts.build_volume import Volume
from fycross.utils.cmd import cmd_util
from fycross.utils.log import log_util

ENGINE_DOCKER = "docker"
ENGINE_PODMAN = "podman"
SUPPORTED_ENGINES = [ENGINE_DOCKER, ENGINE_PODMAN]

# Environment set in every container, before the image environment
BASE_CONTAINER_ENV = {
    "HOME": "/tmp",
    "GOCACHE": "/go/go-build",
}


@dataclass
class RunOptions:
    work_dir: Optional[str] = None


class ContainerImage:
    """One isolated build environment bound to a single (OS, architecture)."""

    def __init__(self, engine, arch, target_os: str, image: str):
        self.engine = engine
        self.arch = arch
        self.os = target_os
        self.image = image
        self.env: Dict[str, str] = {}

    def id(self) -> str:
        return f"{self.os}-{self.arch}"

    def set_env(self, key: str, value: str):
        # the last key set is passed last to the engine
        self.env.pop(key, None)
        self.env[key] = value

    def prepare(self):
        self.engine.prepare_image(self.image)

    def run(self, volume: Volume, options: Optional[RunOptions], argv: List[str]) -> str:
        """
        Run argv in a new container of this image.

        Returns:
            the combined stdout/stderr of the command

        Raises:
            ContainerRunError: the command exited with a non-zero status
        """
        command = self.engine.run_command(self, volume, options or RunOptions(), argv)
        log_util.debug(" ".join(command))
        code, output = cmd_util.exec_command(command)
        if code != 0:
            raise ContainerRunError(argv, code, output)
        if output:
            log_util.debug(output.rstrip())
        return output

    def __repr__(self):
        return f"ContainerImage(id={self.id()!r}, image={self.image!r})"


class ContainerEngine:
    def __init__(self, name: str, binary: str, pull: bool = False):
        self.name = name
        self.binary = binary
        self.pull = pull

    def create_container_image(self, arch, target_os: str, image: str) -> ContainerImage:
        if not image:
            raise EngineError(f"no container image for {target_os}/{arch}")
        return ContainerImage(self, arch, target_os, image)

    def user_args(self) -> List[str]:
        if self.name == ENGINE_PODMAN:
            return ["--userns", "keep-id"]
        if hasattr(os, "getuid"):
            return ["-u", f"{os.getuid()}:{os.getgid()}"]
        return []

    def run_command(self, image: ContainerImage, volume: Volume, options: RunOptions, argv: List[str]) -> List[str]:
        command = [self.binary, "run", "--rm"]
        command.extend(["-w", options.work_dir or volume.work_dir_container()])
        for host, container in volume.mounts():
            command.extend(["-v", f"{host}:{container}"])
        command.extend(self.user_args())
        env = dict(BASE_CONTAINER_ENV)
        env.update(image.env)
        for key, value in env.items():
            command.extend(["-e", f"{key}={value}"])
        command.append(image.image)
        command.extend(argv)
        return command

    def prepare_image(self, image: str):
        """Pull the image when requested or when it is not available locally."""
        if not self.pull:
            code, _ = cmd_util.exec_command([self.binary, "image", "inspect", image])
            if code == 0:
                log_util.debug(f"Image {image} already exists locally")
                return
        log_util.info(f"[i] Pulling image {image}...")
        code, output = cmd_util.exec_command([self.binary, "pull", image])
        if code != 0:
            raise EngineError(f"could not pull image {image}: {output.strip()}")


def find_engine_binary(name: str) -> Optional[str]:
    return shutil.which(name)


def new_container_engine(engine: Optional[str] = None, pull: bool = False) -> ContainerEngine:
    """
    Create the container engine, auto-detecting it when engine is empty.

    Raises:
        EngineError: the engine is unknown or its binary is not in PATH
    """
    if engine:
        engine = engine.lower()
        if engine not in SUPPORTED_ENGINES:
            raise EngineError(
                f"unsupported container engine {engine!r}. Supported: {', '.join(SUPPORTED_ENGINES)}"
            )
        candidates = [engine]
    else:
        candidates = SUPPORTED_ENGINES

    for name in candidates:
        binary = find_engine_binary(name)
        if binary:
            log_util.debug(f"Using container engine {name} ({binary})")
            return ContainerEngine(name, binary, pull=pull)

    raise EngineError(
        f"container engine not found in PATH: {', '.join(candidates)}. "
        "Install Docker or Podman and try again"
    )
