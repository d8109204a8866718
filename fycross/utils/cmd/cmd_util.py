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

import subprocess
import time
from threading import Timer

DEFAULT_TIMEOUT_SECOND = 10


def exec_command(command, env=None, cwd=None):
    # timeout is 3 hours
    return exec_command_with_timeout_second(command, 3 * 3600, env=env, cwd=cwd)


def exec_command_with_timeout_second(
    command,
    timeout_second=DEFAULT_TIMEOUT_SECOND,
    env=None,
    cwd=None,
    stdout=subprocess.PIPE,
    stderr=subprocess.STDOUT,
):
    """
    Run a command and wait for it, killing it after timeout_second.

    Args:
        command: argv list, or a string which is run through the shell
        timeout_second: seconds before the process is killed
        env: process environment (default: inherit)
        cwd: working directory (default: inherit)

    Returns:
        (returncode, output) with stderr merged into output
    """
    start_mills = int(time.time() * 1000)
    try:
        compile_popen = subprocess.Popen(
            command,
            shell=isinstance(command, str),
            stdout=stdout,
            stderr=stderr,
            env=env,
            cwd=cwd,
        )
    except FileNotFoundError as e:
        return 127, str(e)
    timer = Timer(timeout_second, lambda process: process.kill(), [compile_popen])
    try:
        timer.start()
        stdout, stderr = compile_popen.communicate()
    finally:
        timer.cancel()
    err_code = compile_popen.returncode
    err_msg = bytes.decode(stdout or b"", "UTF-8", errors="replace")
    if err_code == -9:
        if not err_msg:
            if stderr:
                err_msg = bytes.decode(stderr, "UTF-8", errors="replace")
            if not err_msg:
                use_time = int(time.time() * 1000) - start_mills
                err_msg = f"Failed for timeout({err_code}), use_time: {use_time}ms"
    return err_code, err_msg
