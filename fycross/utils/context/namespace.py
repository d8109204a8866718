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


# Parsed command line arguments of a command
class CliNameSpace(argparse.Namespace):
    def get(self, name, default=None):
        value = getattr(self, name, None)
        return default if value is None else value
