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
Target architectures and resolution of the --arch flag.
"""

import platform
from enum import Enum
from typing import Iterable, List, Optional, Union

from fycross.build_scripts.build_errors import UnsupportedArchitectureError

# Request every architecture supported by the target OS
ARCH_ALL = "*"


class Architecture(str, Enum):
    AMD64 = "amd64"
    X86 = "386"
    ARM = "arm"
    ARM64 = "arm64"

    def __str__(self):
        return self.value


# platform.machine() values mapped to the matching architecture
HOST_MACHINE_MAP = {
    "x86_64": Architecture.AMD64,
    "amd64": Architecture.AMD64,
    "i386": Architecture.X86,
    "i686": Architecture.X86,
    "x86": Architecture.X86,
    "armv6l": Architecture.ARM,
    "armv7l": Architecture.ARM,
    "arm": Architecture.ARM,
    "aarch64": Architecture.ARM64,
    "arm64": Architecture.ARM64,
}


def host_architecture(machine: Optional[str] = None) -> str:
    """
    Return the architecture name of the host.

    Unknown machines are returned lowercased as-is, so that resolving them
    against a target OS reports them as unsupported.
    """
    machine = (machine if machine is not None else platform.machine()).lower()
    arch = HOST_MACHINE_MAP.get(machine)
    return arch.value if arch else machine


def split_arch_tokens(requested: Union[str, Iterable[str], None]) -> List[str]:
    if requested is None:
        return []
    if isinstance(requested, str):
        requested = requested.split(",")
    return [token.strip() for token in requested if token and token.strip()]


def resolve_target_arch(
    requested: Union[str, Iterable[str], None],
    supported: Iterable[Architecture],
    host_arch: Optional[str] = None,
) -> List[Architecture]:
    """
    Resolve the requested architecture names against the supported set.

    Args:
        requested: comma separated string or list of names; "*" selects all
            supported architectures
        supported: architectures supported by the target OS, in catalog order
        host_arch: default when nothing is requested (default: detected host)

    Returns:
        list of Architecture, de-duplicated, in request order

    Raises:
        UnsupportedArchitectureError: a requested name is not supported
    """
    supported = list(supported)
    tokens = split_arch_tokens(requested)
    if not tokens:
        tokens = [host_arch or host_architecture()]

    resolved = []
    for token in tokens:
        if token == ARCH_ALL:
            candidates = supported
        else:
            match = [arch for arch in supported if arch.value == token.lower()]
            if not match:
                raise UnsupportedArchitectureError(token, supported)
            candidates = match
        for arch in candidates:
            if arch not in resolved:
                resolved.append(arch)
    return resolved
