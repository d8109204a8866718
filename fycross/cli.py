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

import argparse
import importlib
import sys
import traceback

from fycross.build_scripts.build_errors import FycrossError
from fycross.commands.help import get_command_list
from fycross.utils.context.command import CliCommand
from fycross.utils.context.context import CliContext
from fycross.utils.context.namespace import CliNameSpace
from fycross.utils.log import log_util


def load_command(name: str) -> CliCommand:
    module = importlib.import_module(f"fycross.commands.{name}")
    klass = getattr(module, name.capitalize())
    return klass()


# Root Class for Command Line Interface
class Cli(CliCommand):
    def description(self) -> str:
        return """fycross - Build and package Fyne applications for multiple platforms

Every target architecture is built in its own Docker or Podman container
with a preconfigured cross-compiling toolchain.

USAGE:
    fycross <command> [options] [package]

EXAMPLES:
    fycross linux                      # Build for the host architecture
    fycross linux -arch amd64,arm64    # Build for amd64 and arm64
    fycross linux --release            # Package in release mode
    fycross help                       # Show help

For more information on a specific command:
    fycross <command> --help
        """

    def get_command_list(self) -> list:
        return get_command_list()

    def new_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="fycross",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
            add_help=False,
        )
        parser.add_argument(
            "subcommand",
            metavar=f"{self.get_command_list()}",
            type=str,
            nargs="?",
            choices=self.get_command_list(),
        )
        return parser

    def cli(self, argv=None) -> CliNameSpace:
        if argv is None:
            argv = sys.argv[1:]
        parser = self.new_parser()
        if argv[:1] in (["--help"], ["-h"]):
            parser.print_help()
            sys.exit(0)
        # parse only the subcommand, its options are parsed by the subcommand
        args, _ = parser.parse_known_args(argv[:1], namespace=CliNameSpace())
        args.argv = argv[1:]
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        if not args.subcommand:
            log_util.error("No command specified\n")
            self.new_parser().print_help()
            sys.exit(1)

        sub_cmd = load_command(args.subcommand)
        try:
            sub_args = sub_cmd.cli(args.argv)
            context.debug = bool(sub_args.get("debug", False))
            return sub_cmd.exec(context, sub_args)
        except FycrossError as e:
            log_util.error(str(e))
            if log_util.is_debug():
                traceback.print_exc()
            sys.exit(1)
        except KeyboardInterrupt:
            log_util.error("Build aborted by user")
            sys.exit(130)


def main():
    cmd = Cli()
    cmd.exec(CliContext(), cmd.cli())


if __name__ == "__main__":
    main()
