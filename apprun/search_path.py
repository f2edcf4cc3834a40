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

"""Functions to build the search path for programs.

Version managers such as mise or asdf put shim directories into PATH.  The
shims redirect invocations of e.g. gcc to whatever toolchain the version
manager considers active, which might be incompatible with the bundled Emacs.
The functions here remove such directories."""

from collections.abc import Iterable, Sequence
import logging
import os
import os.path
import pathlib
import shutil
from typing import Optional

from apprun import config

# Version managers known to install shim directories.
VERSION_MANAGERS = ('mise', 'asdf', 'rbenv', 'pyenv', 'nodenv', 'goenv')

# Appended to a filtered search path so that standard utilities stay
# reachable.
FALLBACK = ('/usr/local/bin', '/usr/bin', '/bin', '/usr/sbin', '/sbin')

# Complete search path after the bundled binaries for the isolated policy.
ISOLATED = ('/usr/local/bin', '/usr/bin', '/bin')


def is_shim(directory: str) -> bool:
    """Returns whether the given directory is a version manager shim
    directory."""
    parts = pathlib.PurePosixPath(directory).parts
    for i, part in enumerate(parts):
        if part != 'shims':
            continue
        if i == len(parts) - 1:
            return True
        if any(manager in parent.lstrip('.')
               for parent in parts[:i] for manager in VERSION_MANAGERS):
            return True
    return False


def compiler_directory(search_path: Optional[str],
                       compiler: str = 'gcc') -> Optional[pathlib.Path]:
    """Finds the real directory of a C compiler.

    Looks up the compiler in the given search path and follows symbolic links.
    Returns None if the compiler wasn’t found or only resolves to a shim
    directory."""
    if not search_path:
        # shutil.which would fall back to the PATH of this process.
        return None
    program = shutil.which(compiler, path=search_path)
    if not program:
        return None
    directory = pathlib.Path(os.path.realpath(program)).parent
    if is_shim(str(directory)):
        _logger.info('ignoring %s in shim directory %s', compiler, directory)
        return None
    return directory


def build(policy: config.PathPolicy, bin_dir: pathlib.Path,
          injected: Iterable[str], inherited: Optional[str]) -> str:
    """Builds the search path for the launched program.

    Args:
      policy: how to treat injected and inherited directories
      bin_dir: directory containing the bundled binaries; always comes first
      injected: additional directories; only used for the filter policy
      inherited: the inherited value of PATH, if any
    """
    if policy == config.PathPolicy.PRESERVE:
        return _join([str(bin_dir)] + _split(inherited))
    if policy == config.PathPolicy.ISOLATED:
        return _join((str(bin_dir),) + ISOLATED)
    result = [str(bin_dir)]
    for directory in list(injected) + _split(inherited):
        if is_shim(directory):
            _logger.debug('dropping shim directory %s from PATH', directory)
        elif directory not in result:
            result.append(directory)
    result.extend(d for d in FALLBACK if d not in result)
    return _join(result)


def _split(value: Optional[str]) -> list[str]:
    return [d for d in (value or '').split(os.pathsep) if d]


def _join(directories: Sequence[str]) -> str:
    return os.pathsep.join(directories)


_logger = logging.getLogger('apprun.search_path')
