"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import contextlib
import errno
import socket
import threading
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from hostprobe.filesystem.models import EntryKind, EntryStat
from hostprobe.filesystem.reader import FileSystemReader
from hostprobe.volumes.models import VolumeUsage
from hostprobe.volumes.table import MountedPartition, VolumeEnumerator


class FakeFileSystemReader(FileSystemReader):
    """In-memory FileSystemReader built from a nested dict.

    Dict values are directories, ints are regular files of that size and
    EntryStat values are used as-is. ``errors`` maps a path to the OSError
    raised by stat(), or "list:<path>" to the error raised by list_dir().
    ``aliases`` maps a path to another directory it resolves to, which
    models bind mounts and symlink loops.
    """

    def __init__(
        self,
        tree: dict[str, Any],
        *,
        root: str = "/root",
        reverse: bool = False,
        errors: dict[str, OSError] | None = None,
        aliases: dict[str, str] | None = None,
    ) -> None:
        self._entries: dict[str, EntryStat] = {}
        self._children: dict[str, list[str]] = {}
        self._reverse = reverse
        self._errors = errors or {}
        self._aliases = aliases or {}
        self._next_inode = 1
        self.list_calls: list[str] = []
        self._add(root, tree)

    def _add(self, path: str, node: Any) -> None:
        inode = self._next_inode
        self._next_inode += 1
        if isinstance(node, dict):
            self._entries[path] = EntryStat(EntryKind.DIRECTORY, 4096, device=1, inode=inode)
            self._children[path] = []
            for name, child in node.items():
                child_path = f"{path}/{name}"
                self._children[path].append(child_path)
                self._add(child_path, child)
        elif isinstance(node, EntryStat):
            self._entries[path] = node
        else:
            self._entries[path] = EntryStat(EntryKind.FILE, node, device=1, inode=inode)

    def _resolve(self, path: str) -> str:
        for alias, target in self._aliases.items():
            if path == alias or path.startswith(alias + "/"):
                return target + path[len(alias) :]
        return path

    def stat(self, path: str, *, follow_symlinks: bool = False) -> EntryStat:
        if path in self._errors:
            raise self._errors[path]
        real = self._resolve(path)
        if real not in self._entries:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
        return self._entries[real]

    def list_dir(self, path: str) -> list[str]:
        self.list_calls.append(path)
        if f"list:{path}" in self._errors:
            raise self._errors[f"list:{path}"]
        real = self._resolve(path)
        if real not in self._children:
            raise NotADirectoryError(errno.ENOTDIR, "Not a directory", path)
        children = [path + child[len(real) :] for child in self._children[real]]
        return list(reversed(children)) if self._reverse else children


class FakeVolumeEnumerator(VolumeEnumerator):
    """VolumeEnumerator serving a fixed list of volumes."""

    def __init__(
        self,
        volumes: list[VolumeUsage],
        *,
        failing: set[str] | None = None,
        table_error: OSError | None = None,
    ) -> None:
        self._volumes = {v.mount_point: v for v in volumes}
        self._order = [v.mount_point for v in volumes]
        self._failing = failing or set()
        self._table_error = table_error

    def partitions(self) -> Iterator[MountedPartition]:
        if self._table_error is not None:
            raise self._table_error
        for mount_point in self._order:
            v = self._volumes[mount_point]
            yield MountedPartition(mount_point=v.mount_point, device=v.device, fstype=v.fstype)

    def usage(self, partition: MountedPartition) -> VolumeUsage:
        if partition.mount_point in self._failing:
            raise PermissionError(errno.EACCES, "Permission denied", partition.mount_point)
        return self._volumes[partition.mount_point]


class EchoServer:
    """One-connection TCP listener on 127.0.0.1 for client tests.

    Reads the request (at least ``expect_bytes`` if given), replies with
    ``reply`` or echoes the request, then closes the connection.
    """

    def __init__(self, *, reply: bytes | None = None, expect_bytes: int | None = None) -> None:
        self._reply = reply
        self._expect_bytes = expect_bytes
        self._sock = socket.create_server(("127.0.0.1", 0))
        self._sock.settimeout(10.0)
        self.port: int = self._sock.getsockname()[1]
        self.received = b""
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self) -> None:
        try:
            conn, _ = self._sock.accept()
        except OSError:
            return
        with conn:
            data = conn.recv(65536)
            while self._expect_bytes and len(data) < self._expect_bytes:
                chunk = conn.recv(65536)
                if not chunk:
                    break
                data += chunk
            self.received = data
            # The client may already have given up and closed its end
            with contextlib.suppress(OSError):
                conn.sendall(self._reply if self._reply is not None else data)

    def close(self) -> None:
        self._sock.close()
        self._thread.join(timeout=5.0)


@pytest.fixture
def fake_reader() -> Callable[..., FakeFileSystemReader]:
    """Factory for in-memory filesystem readers."""
    return FakeFileSystemReader


@pytest.fixture
def fake_volumes() -> Callable[..., FakeVolumeEnumerator]:
    """Factory for fixed volume enumerators."""
    return FakeVolumeEnumerator


@pytest.fixture
def echo_server() -> Iterator[Callable[..., EchoServer]]:
    """Factory for local echo listeners, closed at teardown."""
    servers: list[EchoServer] = []

    def _start(**kwargs: Any) -> EchoServer:
        server = EchoServer(**kwargs)
        servers.append(server)
        return server

    yield _start

    for server in servers:
        server.close()


@pytest.fixture
def closed_port() -> int:
    """A localhost port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create root/{a.txt (100 bytes), sub/{b.txt (50 bytes)}}."""
    root = tmp_path / "root"
    (root / "sub").mkdir(parents=True)
    (root / "a.txt").write_bytes(b"a" * 100)
    (root / "sub" / "b.txt").write_bytes(b"b" * 50)
    return root


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at a temporary directory.

    Returns:
        Path of the hostprobe config file inside the temporary directory.
    """
    config_home = tmp_path / "xdg-config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home / "hostprobe" / "config.toml"
