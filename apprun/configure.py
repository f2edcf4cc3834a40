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

"""Writes the launcher configuration into an AppDir.

Run this on the build host after installing Emacs into the AppDir.  With
--detect-gcc, the real directory of the host C compiler is recorded so that
native compilation keeps working when the AppImage runs with a sanitized
PATH."""

import argparse
import logging
import os
import pathlib
from typing import Optional

from apprun import config
from apprun import search_path

# Directories injected after the bundled binaries unless --no-path-injection
# is given.
_DEFAULT_INJECTED = ('/usr/local/bin', '/usr/local/sbin')


def main() -> None:
    """Main function."""
    parser = argparse.ArgumentParser(allow_abbrev=False)
    parser.add_argument('--appdir', type=pathlib.Path, required=True)
    parser.add_argument('--version', default='30.2')
    parser.add_argument('--arch', default='x86_64-pc-linux-gnu')
    parser.add_argument('--prefix', type=pathlib.PurePosixPath,
                        default=pathlib.PurePosixPath('usr'))
    parser.add_argument('--frame-name', default='emacs-appimage')
    parser.add_argument('--inject', action='append', default=[])
    parser.add_argument('--detect-gcc', action='store_true', default=False)
    parser.add_argument('--no-path-injection', action='store_true',
                        default=False)
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO,
                        format='%(asctime)s %(levelname)s %(name)s %(message)s')
    home = os.getenv('HOME')
    injected = injected_paths(
        args.inject, detect_gcc=args.detect_gcc,
        home=pathlib.Path(home) if home else None,
        search=os.getenv('PATH'))
    conf = config.Config(
        version=args.version, arch=args.arch, prefix=args.prefix,
        frame_name=args.frame_name,
        path_policy=(config.PathPolicy.ISOLATED if args.no_path_injection
                     else config.PathPolicy.FILTER),
        injected_paths=injected)
    file = config.write(conf, args.appdir)
    _logger.info('wrote launcher configuration %s', file)


def injected_paths(explicit: list[str], *, detect_gcc: bool,
                   home: Optional[pathlib.Path],
                   search: Optional[str]) -> list[str]:
    """Returns the directories to inject into the search path.

    The order is: the user’s ~/.local/bin if it exists, the real directory of
    the C compiler if requested and found, the explicitly given directories
    and finally /usr/local/bin and /usr/local/sbin."""
    result: list[str] = []

    def add(directory: str) -> None:
        if directory not in result:
            result.append(directory)

    if home:
        local_bin = home / '.local' / 'bin'
        if local_bin.is_dir():
            add(str(local_bin))
    if detect_gcc:
        directory = search_path.compiler_directory(search)
        if directory:
            _logger.info('resolved real GCC directory %s', directory)
            add(str(directory))
        else:
            _logger.warning('GCC not found or only found in a shim directory')
    for directory in explicit:
        if not os.path.isabs(directory):
            raise ValueError(f'injected directory {directory} is relative')
        add(directory)
    for directory in _DEFAULT_INJECTED:
        add(directory)
    return result


_logger = logging.getLogger('apprun.configure')


if __name__ == '__main__':
    main()
