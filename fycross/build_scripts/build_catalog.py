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
Target catalog: the supported (OS, architecture) pairs and their toolchains.

Each entry holds the default container image and the environment templates
handed to the packaging tool. Templates are formatted with the fields of the
entry's Toolchain, so supporting a new architecture only means adding a row.
"""

from dataclasses import asdict, dataclass
from typing import Dict, List, Tuple

from fycross.build_scripts.build_arch import Architecture
from fycross.build_scripts.build_errors import UnsupportedArchitectureError

LINUX_OS = "linux"

# Environment key naming the target OS, always set last
OS_ENV_KEY = "GOOS"

LINUX_IMAGE = "ghcr.io/herugen/fyne-cross-images-linux:latest"

ZIG_FLAGS = "-target {triple} -isystem /usr/include -L/usr/lib/{lib_dir}"

LINUX_ENV_TEMPLATES = (
    ("GOARCH", "{goarch}"),
    ("GOARM", "{goarm}"),
    ("CC", "zig cc " + ZIG_FLAGS),
    ("CXX", "zig c++ " + ZIG_FLAGS),
)


@dataclass(frozen=True)
class Toolchain:
    goarch: str
    triple: str  # compiler target triple
    lib_dir: str  # multiarch directory under /usr/lib
    goarm: str = ""


@dataclass(frozen=True)
class TargetCatalogEntry:
    os: str
    arch: Architecture
    image: str
    toolchain: Toolchain
    env_templates: Tuple[Tuple[str, str], ...]

    def environment(self) -> Dict[str, str]:
        """Format the env templates; entries rendering empty are left out."""
        params = asdict(self.toolchain)
        env = {}
        for key, template in self.env_templates:
            value = template.format(**params)
            if value:
                env[key] = value
        return env


def _linux(arch, toolchain):
    return TargetCatalogEntry(LINUX_OS, arch, LINUX_IMAGE, toolchain, LINUX_ENV_TEMPLATES)


# Insertion order is the order architectures are listed to the user
CATALOG = {
    LINUX_OS: {
        Architecture.AMD64: _linux(
            Architecture.AMD64, Toolchain("amd64", "x86_64-linux-gnu", "x86_64-linux-gnu")
        ),
        Architecture.X86: _linux(
            Architecture.X86, Toolchain("386", "x86-linux-gnu", "i386-linux-gnu")
        ),
        Architecture.ARM: _linux(
            Architecture.ARM,
            Toolchain("arm", "arm-linux-gnueabihf", "arm-linux-gnueabihf", goarm="7"),
        ),
        Architecture.ARM64: _linux(
            Architecture.ARM64, Toolchain("arm64", "aarch64-linux-gnu", "aarch64-linux-gnu")
        ),
    },
}


def supported_architectures(target_os: str) -> List[Architecture]:
    return list(CATALOG.get(target_os, {}))


def catalog_entry(target_os: str, arch: Architecture) -> TargetCatalogEntry:
    entries = CATALOG.get(target_os, {})
    if arch not in entries:
        raise UnsupportedArchitectureError(arch, entries)
    return entries[arch]
