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

"""Resolves the program to launch and its environment.

resolve is a pure function of the installation root, the invocation name, the
arguments and the inherited environment; only execute has side effects."""

from collections.abc import Mapping, Sequence
import enum
import os
import pathlib
from typing import NamedTuple, NoReturn, Optional

from apprun import config
from apprun import environment
from apprun import layout
from apprun import target


class Kind(enum.Enum):
    """Kinds of launch failures."""

    TARGET_NOT_FOUND = 'TargetNotFound'
    EXEC_FAILED = 'ExecFailed'


class LaunchError(Exception):
    """Raised if the bundled program can’t be launched."""

    def __init__(self, kind: Kind, filename: pathlib.Path, message: str):
        super().__init__(message)
        self.kind = kind
        self.filename = filename


class Resolution(NamedTuple):
    """The program to launch, its arguments and its environment."""

    program: pathlib.Path
    args: tuple[str, ...]
    env: Mapping[str, str]

    def argv(self) -> list[str]:
        """Returns the full command line, including the program name."""
        return [str(self.program)] + list(self.args)


def resolve(root: pathlib.Path, invoked_name: str, args: Sequence[str],
            inherited: Mapping[str, str],
            conf: Optional[config.Config] = None) -> Resolution:
    """Resolves the program to launch.

    Raises:
      LaunchError if the selected program doesn’t exist in the installation
      root
    """
    conf = conf or config.Config()
    lay = layout.Layout(root, conf)
    selected = target.select(conf, invoked_name, args)
    program = lay.tool(selected.tool)
    if not program.is_file():
        # Don’t fall back to a host program with the same name, it would
        # likely not match the bundled libraries and Lisp files.
        raise LaunchError(Kind.TARGET_NOT_FOUND, program,
                          f'bundled program {program} not found')
    forwarded = selected.args
    if selected.tool == conf.default_tool:
        forwarded = _default_args(conf, lay, forwarded)
    env = environment.build(lay, conf, inherited)
    return Resolution(program, forwarded, env)


def execute(resolution: Resolution) -> NoReturn:
    """Replaces the current process with the resolved program.

    Raises:
      LaunchError if the operating system refuses to run the program
    """
    program = resolution.program
    try:
        os.execve(program, resolution.argv(), dict(resolution.env))
    except OSError as ex:
        raise LaunchError(Kind.EXEC_FAILED, program,
                          f'can’t run {program}: {ex.strerror}') from ex


def _default_args(conf: config.Config, lay: layout.Layout,
                  args: tuple[str, ...]) -> tuple[str, ...]:
    prefix: list[str] = []
    if conf.frame_name:
        prefix += ['--name', conf.frame_name]
    dump = lay.dump()
    if dump.is_file() and not _has_dump_option(args):
        prefix.append('--dump-file=' + str(dump))
    return tuple(prefix) + args


def _has_dump_option(args: Sequence[str]) -> bool:
    for arg in args:
        if arg == '--':
            return False
        if arg == '--dump-file' or arg.startswith('--dump-file='):
            return True
    return False
