# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Selects the bundled program to launch."""

from collections.abc import Sequence
from typing import NamedTuple

from apprun import config


class Target(NamedTuple):
    """A bundled program together with the arguments it receives."""

    tool: str
    args: tuple[str, ...]


def select(conf: config.Config, invoked_name: str,
           args: Sequence[str]) -> Target:
    """Selects the program to launch.

    The first matching rule wins:

    1. If the launcher was invoked under a name starting with the client
       prefix, e.g. through a symbolic link named “emacsclient”, launch the
       client.
    2. If the first argument names a sub-tool, launch that tool and drop the
       first argument.
    3. Otherwise launch the default tool.
    """
    args = tuple(args)
    if invoked_name.startswith(conf.client_prefix):
        return Target(conf.client_tool, args)
    if args and args[0] in conf.sub_tools:
        return Target(args[0], args[1:])
    return Target(conf.default_tool, args)
