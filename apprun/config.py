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

"""Configuration of the AppImage launcher.

The packaging pipeline stores the configuration as a JSON file next to the
launcher, see configure.py.  All keys are optional; missing keys take the
defaults for an Emacs AppDir."""

from collections.abc import Iterable, Mapping
import enum
import json
import pathlib
from typing import Any

FILENAME = 'AppRun.json'


class PathPolicy(enum.Enum):
    """How the launcher builds the PATH of the launched program."""

    # Bundled binaries first, then injected and inherited directories without
    # duplicates and version manager shims, then standard system directories.
    FILTER = 'filter'
    # Bundled binaries first, then the inherited PATH unchanged.
    PRESERVE = 'preserve'
    # Bundled binaries and standard system directories only.
    ISOLATED = 'isolated'


class Config:
    """Represents the launcher configuration."""

    def __init__(self, *,
                 package: str = 'emacs',
                 version: str = '30.2',
                 arch: str = 'x86_64-pc-linux-gnu',
                 prefix: pathlib.PurePosixPath = pathlib.PurePosixPath('usr'),
                 default_tool: str = 'emacs',
                 client_prefix: str = 'emacsclient',
                 client_tool: str = 'emacsclient',
                 sub_tools: Iterable[str] = ('emacsclient', 'ctags', 'etags'),
                 dump_file: str = 'emacs.pdmp',
                 frame_name: str = 'emacs-appimage',
                 path_policy: PathPolicy = PathPolicy.FILTER,
                 injected_paths: Iterable[str] = (),
                 detect_compiler: bool = True,
                 no_injection_variable: str = 'EMACS_PLUS_NO_PATH_INJECTION'):
        if prefix.is_absolute():
            raise ValueError(f'prefix {prefix} is absolute')
        if '..' in prefix.parts:
            raise ValueError(f'prefix {prefix} leaves the installation root')
        sub_tools = frozenset(sub_tools)
        for name in (package, version, arch, default_tool, client_tool,
                     dump_file, *sub_tools):
            _check_name(name)
        if not client_prefix:
            raise ValueError('empty client prefix')
        injected_paths = tuple(injected_paths)
        for directory in injected_paths:
            if not pathlib.PurePosixPath(directory).is_absolute():
                raise ValueError(f'injected directory {directory} is relative')
        self.package = package
        self.version = version
        self.arch = arch
        self.prefix = prefix
        self.default_tool = default_tool
        self.client_prefix = client_prefix
        self.client_tool = client_tool
        self.sub_tools = sub_tools
        self.dump_file = dump_file
        self.frame_name = frame_name
        self.path_policy = PathPolicy(path_policy)
        self.injected_paths = injected_paths
        self.detect_compiler = bool(detect_compiler)
        self.no_injection_variable = no_injection_variable

    def to_json(self) -> dict[str, Any]:
        """Returns a JSON-compatible representation of this configuration."""
        return {
            'package': self.package,
            'version': self.version,
            'arch': self.arch,
            'prefix': str(self.prefix),
            'default_tool': self.default_tool,
            'client_prefix': self.client_prefix,
            'client_tool': self.client_tool,
            'sub_tools': sorted(self.sub_tools),
            'dump_file': self.dump_file,
            'frame_name': self.frame_name,
            'path_policy': self.path_policy.value,
            'injected_paths': list(self.injected_paths),
            'detect_compiler': self.detect_compiler,
            'no_injection_variable': self.no_injection_variable,
        }


def from_json(data: Mapping[str, Any]) -> Config:
    """Creates a configuration from a parsed JSON object.

    Raises:
      ValueError if the object contains unknown keys or invalid values
    """
    if not isinstance(data, Mapping):
        raise ValueError(f'configuration must be a JSON object, not {data!r}')
    unknown = sorted(frozenset(data) - _KEYS)
    if unknown:
        raise ValueError(f'unknown configuration keys {unknown}')
    for key, value in data.items():
        if key in ('sub_tools', 'injected_paths'):
            if not (isinstance(value, list)
                    and all(isinstance(v, str) for v in value)):
                raise ValueError(f'{key} must be a list of strings')
        elif key == 'detect_compiler':
            if not isinstance(value, bool):
                raise ValueError(f'{key} must be a boolean')
        elif not isinstance(value, str):
            raise ValueError(f'{key} must be a string')
    kwargs = dict(data)
    if 'prefix' in kwargs:
        kwargs['prefix'] = pathlib.PurePosixPath(kwargs['prefix'])
    if 'path_policy' in kwargs:
        try:
            kwargs['path_policy'] = PathPolicy(kwargs['path_policy'])
        except ValueError as ex:
            raise ValueError(
                f'invalid PATH policy {kwargs["path_policy"]!r}') from ex
    return Config(**kwargs)


def load(directory: pathlib.Path) -> Config:
    """Loads the configuration file from the given directory.

    Returns the default configuration if the directory doesn’t contain a
    configuration file.
    """
    file = directory / FILENAME
    try:
        text = file.read_text(encoding='utf-8')
    except FileNotFoundError:
        return Config()
    try:
        data = json.loads(text)
    except json.JSONDecodeError as ex:
        raise ValueError(f'invalid configuration file {file}: {ex}') from ex
    return from_json(data)


def write(conf: Config, directory: pathlib.Path) -> pathlib.Path:
    """Writes the configuration file into the given directory."""
    file = directory / FILENAME
    with file.open('wt', encoding='utf-8') as stream:
        json.dump(conf.to_json(), stream, indent=2)
        stream.write('\n')
    return file


def _check_name(name: str) -> None:
    if not name or name in ('.', '..') or '/' in name or '\0' in name:
        raise ValueError(f'invalid file name {name!r}')


_KEYS = frozenset(Config().to_json())
