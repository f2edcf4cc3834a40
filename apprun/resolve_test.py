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

"""Unit tests for apprun.resolve."""

import pathlib
import shutil
import tempfile
from unittest import mock

from absl.testing import absltest

from apprun import config
from apprun import resolve


def _config(**kwargs) -> config.Config:
    defaults = {
        'prefix': pathlib.PurePosixPath(),
        'package': 'app',
        'version': '1.0',
        'default_tool': 'app',
        'client_prefix': 'app-client',
        'client_tool': 'app-client-real',
        'sub_tools': ['tool-x', 'tool-missing'],
        'dump_file': 'app.dump',
        'frame_name': '',
        'detect_compiler': False,
    }
    return config.Config(**dict(defaults, **kwargs))


class ResolveTest(absltest.TestCase):
    """Unit tests for resolve.resolve."""

    def setUp(self) -> None:
        super().setUp()
        directory = tempfile.mkdtemp(prefix='apprun-test-')
        self.addCleanup(shutil.rmtree, directory)
        self.root = pathlib.Path(directory).resolve()
        self.bin = self.root / 'bin'
        self.bin.mkdir()
        for name in ('app', 'app-client-real', 'tool-x'):
            (self.bin / name).write_text('#!/bin/sh\n', encoding='ascii')
            (self.bin / name).chmod(0o755)
        self.dump = (self.root / 'libexec' / 'app' / '1.0'
                     / 'x86_64-pc-linux-gnu' / 'app.dump')
        self.conf = _config()

    def _add_dump(self) -> None:
        self.dump.parent.mkdir(parents=True)
        self.dump.write_bytes(b'dump')

    def test_client(self) -> None:
        """Test that the client name selects the client."""
        got = resolve.resolve(self.root, 'app-client', ['--connect'], {},
                              self.conf)
        self.assertEqual(got.program, self.bin / 'app-client-real')
        self.assertTupleEqual(got.args, ('--connect',))

    def test_client_ignores_dump(self) -> None:
        """Test that only the default tool receives the dump file."""
        self._add_dump()
        got = resolve.resolve(self.root, 'app-client', ['tool-x'], {},
                              self.conf)
        self.assertEqual(got.program, self.bin / 'app-client-real')
        self.assertTupleEqual(got.args, ('tool-x',))

    def test_sub_tool(self) -> None:
        """Test that a leading sub-tool argument is consumed."""
        self._add_dump()
        got = resolve.resolve(self.root, 'app', ['tool-x', '--flag'], {},
                              self.conf)
        self.assertEqual(got.program, self.bin / 'tool-x')
        self.assertTupleEqual(got.args, ('--flag',))

    def test_dump(self) -> None:
        """Test that the dump file is passed to the default tool."""
        self._add_dump()
        got = resolve.resolve(self.root, 'app', ['file.txt'], {}, self.conf)
        self.assertEqual(got.program, self.bin / 'app')
        self.assertTupleEqual(got.args,
                              ('--dump-file=' + str(self.dump), 'file.txt'))
        self.assertListEqual(got.argv(),
                             [str(self.bin / 'app'),
                              '--dump-file=' + str(self.dump), 'file.txt'])

    def test_no_dump(self) -> None:
        """Test that the dump flag is omitted without a dump file."""
        got = resolve.resolve(self.root, 'app', ['file.txt'], {}, self.conf)
        self.assertTupleEqual(got.args, ('file.txt',))

    def test_explicit_dump(self) -> None:
        """Test that a user-supplied dump file isn’t duplicated."""
        self._add_dump()
        for args in (['--dump-file=/tmp/other.pdmp'],
                     ['-nw', '--dump-file', '/tmp/other.pdmp']):
            with self.subTest(args=args):
                got = resolve.resolve(self.root, 'app', args, {}, self.conf)
                self.assertTupleEqual(got.args, tuple(args))
        got = resolve.resolve(self.root, 'app', ['--', '--dump-file=x'], {},
                              self.conf)
        self.assertTupleEqual(
            got.args, ('--dump-file=' + str(self.dump), '--', '--dump-file=x'))

    def test_frame_name(self) -> None:
        """Test that the frame name comes before the dump file."""
        self._add_dump()
        conf = _config(frame_name='emacs-appimage')
        got = resolve.resolve(self.root, 'AppRun', ['-nw'], {}, conf)
        self.assertTupleEqual(
            got.args,
            ('--name', 'emacs-appimage', '--dump-file=' + str(self.dump),
             '-nw'))

    def test_not_found(self) -> None:
        """Test that a missing program is reported."""
        with self.assertRaises(resolve.LaunchError) as cm:
            resolve.resolve(self.root, 'app', ['tool-missing'], {}, self.conf)
        self.assertEqual(cm.exception.kind, resolve.Kind.TARGET_NOT_FOUND)
        self.assertEqual(cm.exception.filename, self.bin / 'tool-missing')
        self.assertIn(str(self.bin / 'tool-missing'), str(cm.exception))

    def test_environment(self) -> None:
        """Test that host values of layout variables are overridden."""
        got = resolve.resolve(self.root, 'app', [],
                              {'EMACSLOADPATH': '/usr/share/emacs/lisp',
                               'PATH': '/home/user/.asdf/shims:/usr/bin'},
                              self.conf)
        self.assertTrue(pathlib.Path(got.env['EMACSLOADPATH'].split(':')[0])
                        .is_relative_to(self.root))
        self.assertNotIn('/home/user/.asdf/shims', got.env['PATH'])
        self.assertTrue(got.env['PATH'].startswith(str(self.bin) + ':'))

    def test_idempotent(self) -> None:
        """Test that resolution is deterministic."""
        self._add_dump()
        inherited = {'PATH': '/usr/bin', 'HOME': '/home/user'}
        self.assertEqual(
            resolve.resolve(self.root, 'app', ['x'], inherited, self.conf),
            resolve.resolve(self.root, 'app', ['x'], inherited, self.conf))


class ExecuteTest(absltest.TestCase):
    """Unit tests for resolve.execute."""

    def test_execve(self) -> None:
        """Test that the program replaces the current process."""
        resolution = resolve.Resolution(pathlib.Path('/opt/app/bin/app'),
                                        ('file.txt',), {'PATH': '/usr/bin'})
        with mock.patch('os.execve') as execve:
            resolve.execute(resolution)
        execve.assert_called_once_with(
            pathlib.Path('/opt/app/bin/app'),
            ['/opt/app/bin/app', 'file.txt'], {'PATH': '/usr/bin'})

    def test_failure(self) -> None:
        """Test that operating system errors are reported."""
        resolution = resolve.Resolution(pathlib.Path('/opt/app/bin/app'),
                                        (), {})
        with mock.patch('os.execve',
                        side_effect=PermissionError(13, 'Permission denied')):
            with self.assertRaises(resolve.LaunchError) as cm:
                resolve.execute(resolution)
        self.assertEqual(cm.exception.kind, resolve.Kind.EXEC_FAILED)
        self.assertIn('Permission denied', str(cm.exception))
        self.assertIsInstance(cm.exception.__cause__, PermissionError)


if __name__ == '__main__':
    absltest.main()
