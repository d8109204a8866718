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


# Outcome of the build pipeline for one container image
class CliResult:
    def __init__(self, value=None, error=None, image_id=None, elapsed=0.0):
        self.value = value
        self.error = error
        self.image_id = image_id
        self.elapsed = elapsed

    def is_success(self):
        return self.error is None

    def is_failure(self):
        return self.error is not None

    def get_value(self, default=None):
        if self.is_success():
            return self.value
        else:
            return default

    def get_error(self, default=None):
        if self.is_failure():
            return self.error
        else:
            return default

    def __repr__(self):
        state = f"value={self.value!r}" if self.is_success() else f"error={self.error!r}"
        return f"CliResult(image_id={self.image_id!r}, {state})"
