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

import os

from fycross.utils.context.command import CliCommand
from fycross.utils.context.context import CliContext
from fycross.utils.context.namespace import CliNameSpace

COMMANDS_PATH = os.path.split(os.path.realpath(__file__))[0]


def get_command_list() -> list:
    arr = []
    for command in sorted(os.listdir(COMMANDS_PATH)):
        if command.startswith("_") or command.startswith("test_"):
            continue
        if command.endswith(".py"):
            arr.append(os.path.splitext(command)[0])
    return arr


class Help(CliCommand):
    def description(self) -> str:
        return """Show help information for fycross commands.

Use 'fycross <command> --help' for command-specific help.
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = self.new_parser()
        parser.usage = "%(prog)s"
        return parser.parse_args(argv or [], namespace=CliNameSpace())

    def exec(self, context: CliContext, args: CliNameSpace):
        # fycross.cli imports this module
        from fycross.cli import load_command

        print("\n" + "=" * 70)
        print("fycross - Build and package Fyne applications in containers")
        print("=" * 70)
        print("\nUSAGE:\n    fycross <command> [options] [package]")
        print("\nCOMMANDS:")
        for name in get_command_list():
            summary = load_command(name).description().strip().splitlines()[0]
            print(f"    {name:10}  {summary}")
        print("\nREQUIREMENTS:")
        print("    Docker or Podman installed and running")
        print("\nFor more information on a specific command:")
        print("    fycross <command> --help\n")
