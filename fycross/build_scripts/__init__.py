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

"""Build scripts shared by the platform commands."""

__all__ = [
    "build_arch",
    "build_catalog",
    "build_context",
    "build_errors",
    "build_linux",
    "build_pipeline",
    "build_utils",
    "build_volume",
]
