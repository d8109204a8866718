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
from abc import ABC, abstractmethod

from fycross.utils.context.context import CliContext
from fycross.utils.context.namespace import CliNameSpace

PROGRAM_NAME = "fycross"

USAGE_TEMPLATE = "{program} {name} [options] [package]"


# Base class of every subcommand: parse its arguments, then run it
class CliCommand(ABC):
    def name(self) -> str:
        return type(self).__name__.lower()

    @abstractmethod
    def description(self) -> str:
        pass

    def usage(self) -> str:
        return USAGE_TEMPLATE.format(program=PROGRAM_NAME, name=self.name())

    def new_parser(self) -> argparse.ArgumentParser:
        return argparse.ArgumentParser(
            prog=f"{PROGRAM_NAME} {self.name()}",
            usage=self.usage(),
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )

    @abstractmethod
    def cli(self, argv=None) -> CliNameSpace:
        pass

    @abstractmethod
    def exec(self, context: CliContext, args: CliNameSpace):
        pass
