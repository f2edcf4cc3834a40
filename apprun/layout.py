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

"""Contains a class for the directory layout of an installation root."""

import pathlib

from apprun import config

# Subdirectories of the versioned Lisp directory that go into the load path in
# addition to the Lisp directory itself.
_LISP_SUBDIRS = ('emacs-lisp', 'progmodes', 'language', 'international',
                 'textmodes', 'vc', 'net')


class Layout:
    """Represents the fixed directory layout below an installation root.

    The layout is created once by the packaging pipeline and never modified
    afterwards.  All methods only compute filenames; none of them checks
    whether the files exist."""

    def __init__(self, root: pathlib.Path, conf: config.Config):
        if not root.is_absolute():
            raise ValueError(f'installation root {root} is relative')
        self.root = root
        self._prefix = root / conf.prefix
        self._package = conf.package
        self._version = conf.version
        self._arch = conf.arch
        self._dump_file = conf.dump_file

    def bin(self) -> pathlib.Path:
        """Returns the directory containing the bundled binaries."""
        return self._prefix / 'bin'

    def tool(self, name: str) -> pathlib.Path:
        """Returns the filename of the bundled binary with the given name."""
        return self.bin() / name

    def lib(self) -> tuple[pathlib.Path, ...]:
        """Returns the directories containing bundled shared libraries."""
        return (self._prefix / 'lib', self._prefix / 'lib64')

    def libexec(self) -> pathlib.Path:
        """Returns the versioned, architecture-specific libexec directory."""
        return (self._prefix / 'libexec' / self._package / self._version
                / self._arch)

    def dump(self) -> pathlib.Path:
        """Returns the filename of the dump file."""
        return self.libexec() / self._dump_file

    def share(self) -> pathlib.Path:
        return self._prefix / 'share' / self._package

    def data(self) -> pathlib.Path:
        """Returns the data directory, which also contains the DOC file."""
        return self.share() / self._version / 'etc'

    def load_path(self) -> tuple[pathlib.Path, ...]:
        """Returns the default load path."""
        lisp = self.share() / self._version / 'lisp'
        return ((lisp,) + tuple(lisp / d for d in _LISP_SUBDIRS)
                + (self.share() / 'site-lisp',))

    def fonts(self) -> pathlib.Path:
        """Returns the Fontconfig configuration directory."""
        return self.root / 'etc' / 'fonts'
