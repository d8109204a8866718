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

import sys

from fycross.build_scripts.build_arch import host_architecture, resolve_target_arch
from fycross.build_scripts.build_catalog import LINUX_OS, supported_architectures
from fycross.build_scripts.build_context import make_default_context
from fycross.build_scripts.build_linux import LinuxBuilder
from fycross.build_scripts.build_pipeline import run_pipeline
from fycross.build_scripts.build_utils import add_common_flags, setup_container_images
from fycross.dockers.container_engine import new_container_engine
from fycross.utils.context.command import CliCommand
from fycross.utils.context.context import CliContext
from fycross.utils.context.namespace import CliNameSpace
from fycross.utils.log import log_util


class Linux(CliCommand):
    def __init__(self):
        self.images = []
        self.context = None
        self.host_arch = None

    def description(self) -> str:
        return """Build and package a Fyne application for the Linux OS.

Each target architecture is built in its own container. Packages are
written to fycross/dist/linux-<arch>/ and executables to
fycross/bin/linux-<arch>/ in the work dir.

EXAMPLES:
    fycross linux                          # Build for the host architecture
    fycross linux -arch amd64,arm64        # Build for amd64 and arm64
    fycross linux -arch '*' -j 4           # Build every architecture, 4 at a time
    fycross linux --release --app-id com.example.app ./cmd/app
        """

    def supported_architectures(self) -> list:
        return supported_architectures(LINUX_OS)

    def host_architecture(self) -> str:
        if self.host_arch is None:
            self.host_arch = host_architecture()
        return self.host_arch

    def cli(self, argv=None) -> CliNameSpace:
        parser = self.new_parser()
        parser.add_argument(
            "-arch", "--arch",
            default=None,
            help="List of target architecture to build separated by comma. "
            f"Supported arch: {', '.join(str(a) for a in self.supported_architectures())} "
            f"(default: {self.host_architecture()})",
        )
        add_common_flags(parser)
        if argv is None:
            argv = sys.argv[2:]
        args = parser.parse_args(argv, namespace=CliNameSpace())
        log_util.set_debug(args.debug)
        self.setup_container_images(args)
        return args

    def setup_container_images(self, args: CliNameSpace):
        """Resolve the targets and create one container image per architecture."""
        archs = resolve_target_arch(args.arch, self.supported_architectures(), host_arch=self.host_architecture())
        ctx = make_default_context(args, args.get("package", "."))
        engine = new_container_engine(ctx.engine, pull=ctx.pull)
        self.context = ctx
        self.images = setup_container_images(ctx, engine, archs, LINUX_OS)

    def exec(self, context: CliContext, args: CliNameSpace):
        if self.context is None:
            self.setup_container_images(args)
        results = run_pipeline(
            self.context,
            self.images,
            LinuxBuilder(self.context),
            jobs=args.get("jobs", 1),
            keep_going=args.get("keep_going", False),
        )
        log_util.success(f"Built {len(results)} Linux target(s) for {self.context.name}")
        return results
