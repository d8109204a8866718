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
Errors raised while resolving targets and running the build pipeline.

Every stage of the pipeline raises its own error type so the message shown
to the user tells which step failed. Errors raised for one container image
carry its id in image_id.
"""


class FycrossError(Exception):
    """Base class of all fycross errors."""

    def __init__(self, message, image_id=None):
        super().__init__(message)
        self.message = message
        self.image_id = image_id

    @property
    def stage(self) -> str:
        return "build"

    def __str__(self):
        if self.image_id:
            return f"[{self.image_id}] {self.message}"
        return self.message


class UnsupportedArchitectureError(FycrossError):
    def __init__(self, arch, supported):
        self.arch = arch
        self.supported = list(supported)
        names = ", ".join(str(s) for s in self.supported)
        super().__init__(f"arch {arch!r} is not supported. Supported: {names}")

    @property
    def stage(self) -> str:
        return "target resolution"


class ContextCreationError(FycrossError):
    @property
    def stage(self) -> str:
        return "context"


class EngineError(FycrossError):
    @property
    def stage(self) -> str:
        return "container engine"


class ContainerRunError(EngineError):
    """A command run inside a container exited with a non-zero status."""

    def __init__(self, argv, returncode, output=""):
        self.argv = list(argv)
        self.returncode = returncode
        self.output = output or ""
        message = f"command {' '.join(self.argv)!r} exited with code {returncode}"
        tail = self.output.strip().splitlines()[-5:]
        if tail:
            message += ":\n" + "\n".join(f"  {line}" for line in tail)
        super().__init__(message)


class PrepareError(FycrossError):
    @property
    def stage(self) -> str:
        return "prepare"


class PackagingError(FycrossError):
    @property
    def stage(self) -> str:
        return "packaging"


class RelocateOrExtractError(FycrossError):
    pass


class RelocateError(RelocateOrExtractError):
    @property
    def stage(self) -> str:
        return "relocation"


class ExtractError(RelocateOrExtractError):
    @property
    def stage(self) -> str:
        return "extraction"


class BuildError(FycrossError):
    """One or more container images failed to build."""

    def __init__(self, failures):
        self.failures = list(failures)
        lines = [f"{len(self.failures)} target(s) failed:"]
        for err in self.failures:
            lines.append(f"  - {err.image_id or '?'} ({err.stage}): {err.message}")
        super().__init__("\n".join(lines))
