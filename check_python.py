#!/usr/bin/env python3

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

"""Runs Pylint and Pytype over the Python sources of this project."""

import argparse
import os
import pathlib
import subprocess
import sys

# Directories containing Python sources to check.
_SOURCE_DIRS = ('apprun',)
_SCRIPTS = ('build.py', 'check_python.py')


class Workspace:
    """Represents the set of Python sources to check."""

    def __init__(self, root: pathlib.Path) -> None:
        srcs = [root / name for name in _SCRIPTS]
        for directory in _SOURCE_DIRS:
            srcs.extend((root / directory).glob('**/*.py'))
        srcs = [file for file in srcs if file.is_file()]
        if not srcs:
            raise FileNotFoundError(f'no source files found in {root}')
        self.root = root
        self.srcs = frozenset(srcs)

    def run(self, module: str, *args: str) -> None:
        """Runs the given Python module over all sources.

        Exits with the module’s exit code if it fails."""
        env = dict(os.environ,
                   PYTHONPATH=os.pathsep.join([str(self.root)] + sys.path))
        result = subprocess.run(
            [sys.executable, '-m', module, *args, '--']
            + [str(file.relative_to(self.root)) for file in sorted(self.srcs)],
            check=False, cwd=self.root, env=env,
            stdout=subprocess.PIPE, stderr=subprocess.STDOUT,
            encoding='utf-8', errors='backslashreplace')
        if result.returncode:
            print(result.stdout)
            sys.exit(result.returncode)


def main() -> None:
    """Main function."""
    parser = argparse.ArgumentParser(allow_abbrev=False)
    parser.add_argument('--pylintrc', type=pathlib.Path,
                        default=pathlib.Path(__file__).parent / '.pylintrc')
    parser.add_argument('--pytype', action='store_true', default=False)
    args = parser.parse_args()
    workspace = Workspace(pathlib.Path(__file__).parent.absolute())
    workspace.run('pylint', '--persistent=no',
                  '--rcfile=' + str(args.pylintrc.resolve()))
    if os.name == 'posix' and args.pytype:
        workspace.run('pytype', '--no-cache')


if __name__ == '__main__':
    main()
