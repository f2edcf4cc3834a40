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

"""Builds the environment for the launched program.

The environment is derived from the inherited one; the inherited mapping is
never modified."""

from collections.abc import Iterable, Mapping
import os
import shutil
from typing import Optional

from apprun import config
from apprun import layout
from apprun import search_path

# Variables that point into the installation root.  Host values for these
# would refer to a host Emacs with a different layout.
LAYOUT_VARIABLES = frozenset({
    'EMACSDIR', 'EMACSDATA', 'EMACSDOC', 'EMACSLOADPATH', 'EMACSPATH',
    'FONTCONFIG_PATH',
})

# Inherited variables that are removed before building the new environment.
STALE_VARIABLES = LAYOUT_VARIABLES | frozenset({
    'EMACS_BASE', 'INFOPATH',
    'NATIVE_COMP_DRIVER_OPTIONS', 'NATIVE_COMP_COMPILER_OPTIONS',
    'MISE_SHELL', 'MISE_ORIGINAL_PATH', 'ASDF_DIR', 'ASDF_DATA_DIR',
    'RBENV_SHELL', 'PYENV_SHELL', 'NODENV_SHELL', 'GOENV_SHELL',
    'CC',
})
STALE_PREFIXES = ('MISE_', 'ASDF_', 'RUBY_', 'GEM_')

# Work around GTK module and accessibility bus warnings and FUSE deadlocks.
FIXED = {
    'GTK_MODULES': '',
    'UBUNTU_MENUPROXY': '0',
    'NO_AT_BRIDGE': '1',
    'LIBFUSE_DISABLE_THREAD_SPAWNING': '1',
}

# Host directories where native compilation finds libgccjit and friends.
HOST_LIBRARY_DIRS = ('/usr/lib', '/usr/lib64', '/usr/lib/gcc',
                     '/usr/lib/x86_64-linux-gnu')


def is_stale(name: str) -> bool:
    """Returns whether the inherited variable with the given name is
    removed."""
    return name in STALE_VARIABLES or name.startswith(STALE_PREFIXES)


def sanitize(inherited: Mapping[str, str]) -> dict[str, str]:
    """Returns a copy of the inherited environment without stale
    variables."""
    return {k: v for k, v in inherited.items() if not is_stale(k)}


def policy(conf: config.Config,
           inherited: Mapping[str, str]) -> config.PathPolicy:
    """Returns the effective PATH policy.

    Users can switch off directory injection by setting the variable named in
    the configuration."""
    var = conf.no_injection_variable
    if (conf.path_policy == config.PathPolicy.FILTER
            and var and inherited.get(var)):
        return config.PathPolicy.ISOLATED
    return conf.path_policy


def build(lay: layout.Layout, conf: config.Config,
          inherited: Mapping[str, str]) -> dict[str, str]:
    """Builds the environment for the launched program."""
    env = sanitize(inherited)
    effective = policy(conf, inherited)
    injected = list(conf.injected_paths)
    if effective == config.PathPolicy.FILTER and conf.detect_compiler:
        compiler = search_path.compiler_directory(inherited.get('PATH'))
        if compiler:
            injected.append(str(compiler))
    path = search_path.build(effective, lay.bin(), injected,
                             inherited.get('PATH'))
    env['PATH'] = path
    if effective == config.PathPolicy.FILTER:
        compiler_program = shutil.which('gcc', path=path)
        if compiler_program:
            env['CC'] = compiler_program
    env['LD_LIBRARY_PATH'] = _prepend(map(str, lay.lib()),
                                      inherited.get('LD_LIBRARY_PATH'))
    env['LIBRARY_PATH'] = _prepend(HOST_LIBRARY_DIRS,
                                   inherited.get('LIBRARY_PATH'))
    env.update(
        EMACSDIR=str(lay.share()),
        EMACSDATA=str(lay.data()),
        EMACSDOC=str(lay.data()),
        EMACSLOADPATH=os.pathsep.join(map(str, lay.load_path())),
        EMACSPATH=os.pathsep.join([str(lay.libexec()), str(lay.bin())]),
        FONTCONFIG_PATH=str(lay.fonts()),
    )
    env.update(FIXED)
    return env


def _prepend(directories: Iterable[str], inherited: Optional[str]) -> str:
    result = list(directories)
    result.extend(d for d in (inherited or '').split(os.pathsep) if d)
    return os.pathsep.join(result)
