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

"""Entry point of the AppImage.

The AppImage runtime runs the AppRun program at the root of the mounted
AppDir.  AppRun finds the bundled program to run, builds a clean environment
for it and replaces itself with that program.  Set APPRUN_DEBUG=1 to see what
it does."""

from collections.abc import Mapping, Sequence
import logging
import os
import os.path
import pathlib
import sys
from typing import Optional

from apprun import config
from apprun import resolve

# Exit codes follow the conventions of POSIX shells.
_EXIT_NOT_FOUND = 127
_EXIT_CANNOT_EXECUTE = 126
_EXIT_CONFIG = 2


def main(argv: Optional[Sequence[str]] = None,
         environ: Optional[Mapping[str, str]] = None) -> None:
    """Main function."""
    argv = list(sys.argv if argv is None else argv)
    environ = dict(os.environ if environ is None else environ)
    logging.basicConfig(
        level=logging.DEBUG if environ.get('APPRUN_DEBUG') else logging.WARNING,
        format='AppRun: %(message)s')
    root = install_root(argv[0])
    # The AppImage runtime passes the name of the symbolic link that invoked
    # the AppImage in ARGV0.
    invoked_name = os.path.basename(environ.get('ARGV0') or argv[0])
    try:
        conf = config.load(root)
    except (OSError, ValueError) as ex:
        _logger.error('invalid configuration in %s: %s', root, ex)
        sys.exit(_EXIT_CONFIG)
    try:
        resolution = resolve.resolve(root, invoked_name, argv[1:], environ,
                                     conf)
        _log_resolution(resolution, environ)
        resolve.execute(resolution)
    except resolve.LaunchError as ex:
        _logger.error('%s', ex)
        sys.exit(_EXIT_NOT_FOUND
                 if ex.kind == resolve.Kind.TARGET_NOT_FOUND
                 else _EXIT_CANNOT_EXECUTE)


def install_root(launcher: str) -> pathlib.Path:
    """Returns the installation root, i.e., the directory containing the real
    launcher file."""
    return pathlib.Path(os.path.realpath(launcher)).parent


def _log_resolution(resolution: resolve.Resolution,
                    inherited: Mapping[str, str]) -> None:
    if not _logger.isEnabledFor(logging.DEBUG):
        return
    _logger.debug('running %s', resolution.argv())
    for name in sorted(inherited.keys() - resolution.env.keys()):
        _logger.debug('unset %s', name)
    for name, value in sorted(resolution.env.items()):
        if inherited.get(name) != value:
            _logger.debug('set %s=%s', name, value)


_logger = logging.getLogger('apprun.launch')


if __name__ == '__main__':
    main()
