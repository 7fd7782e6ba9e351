import os
import socket
from pathlib import Path

import pytest

from pathresolver.resolver.classify import classify
from pathresolver.resolver.errors import SymlinkCycle, UnknownPathType
from pathresolver.resolver.filesystem import LocalFileSystem, PathStat
from tests.helpers import FakeFileSystem, touch


@pytest.mark.anyio
async def test_regular_file_is_a_file(tmp_path: Path) -> None:
    target = touch(tmp_path / "a.txt", "a")

    resolution = await classify(str(target), LocalFileSystem())

    assert resolution.kind == "file"
    assert resolution.path == str(target)
    assert resolution.via == "filesystem"


@pytest.mark.anyio
async def test_directory_is_a_directory(tmp_path: Path) -> None:
    resolution = await classify(str(tmp_path), LocalFileSystem())

    assert resolution.kind == "directory"
    assert resolution.path == str(tmp_path)


@pytest.mark.anyio
@pytest.mark.parametrize("depth", [1, 2, 5, 12])
async def test_link_chain_ends_at_real_file(tmp_path: Path, depth: int) -> None:
    target = touch(tmp_path / "real" / "final.js")
    previous = target
    for index in range(depth):
        link = tmp_path / f"link{index}"
        link.symlink_to(previous)
        previous = link

    resolution = await classify(str(previous), LocalFileSystem())

    assert resolution.kind == "file"
    assert resolution.path == os.path.realpath(target)


@pytest.mark.anyio
async def test_link_to_directory_is_a_directory(tmp_path: Path) -> None:
    real = tmp_path / "real"
    real.mkdir()
    link = tmp_path / "alias"
    link.symlink_to(real, target_is_directory=True)

    resolution = await classify(str(link), LocalFileSystem())

    assert resolution.kind == "directory"
    assert resolution.path == os.path.realpath(real)


@pytest.mark.anyio
async def test_one_level_links_are_followed_in_a_loop() -> None:
    fs = FakeFileSystem(
        nodes={
            "/a": ("link", "/b"),
            "/b": ("link", "/c"),
            "/c": ("link", "/d"),
            "/d": "file",
        }
    )

    resolution = await classify("/a", fs)

    assert resolution.path == "/d"
    assert [call for call in fs.calls if call[0] == "real_path"] == [
        ("real_path", "/a"),
        ("real_path", "/b"),
        ("real_path", "/c"),
    ]


@pytest.mark.anyio
async def test_link_cycle_is_reported() -> None:
    fs = FakeFileSystem(nodes={"/a": ("link", "/b"), "/b": ("link", "/a")})

    with pytest.raises(SymlinkCycle) as exc_info:
        await classify("/a", fs)

    assert exc_info.value.path == "/a"
    assert exc_info.value.chain == ["/b", "/a"]


@pytest.mark.anyio
async def test_link_chain_longer_than_depth_bound_fails() -> None:
    nodes: dict[str, object] = {f"/l{i}": ("link", f"/l{i + 1}") for i in range(10)}
    nodes["/l10"] = "file"

    with pytest.raises(SymlinkCycle):
        await classify("/l0", FakeFileSystem(nodes=nodes), max_depth=3)

    resolution = await classify("/l0", FakeFileSystem(nodes=nodes), max_depth=10)
    assert resolution.path == "/l10"


@pytest.mark.anyio
async def test_self_referencing_link_surfaces_filesystem_error(tmp_path: Path) -> None:
    link = tmp_path / "loop"
    link.symlink_to(link)

    with pytest.raises(OSError):
        await classify(str(link), LocalFileSystem())


@pytest.mark.anyio
async def test_device_node_is_unknown() -> None:
    fs = FakeFileSystem(nodes={"/dev/null": "device"})

    with pytest.raises(UnknownPathType) as exc_info:
        await classify("/dev/null", fs)

    assert exc_info.value.path == "/dev/null"
    assert exc_info.value.code == "E_RESOLVE_PATH_UNKNOWN_TYPE"


@pytest.mark.anyio
@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="requires mkfifo")
async def test_fifo_is_unknown(tmp_path: Path) -> None:
    fifo = tmp_path / "pipe"
    os.mkfifo(fifo)

    with pytest.raises(UnknownPathType):
        await classify(str(fifo), LocalFileSystem())


@pytest.mark.anyio
@pytest.mark.skipif(not hasattr(socket, "AF_UNIX"), reason="requires unix sockets")
async def test_unix_socket_is_unknown(tmp_path: Path) -> None:
    path = tmp_path / "s.sock"
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.bind(str(path))
        with pytest.raises(UnknownPathType):
            await classify(str(path), LocalFileSystem())
    finally:
        sock.close()


@pytest.mark.anyio
async def test_missing_path_raises_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        await classify(str(tmp_path / "missing"), LocalFileSystem())


def test_path_stat_from_mode() -> None:
    import stat

    assert PathStat.from_mode(stat.S_IFREG | 0o644) == PathStat(is_file=True)
    assert PathStat.from_mode(stat.S_IFDIR | 0o755) == PathStat(is_directory=True)
    assert PathStat.from_mode(stat.S_IFLNK | 0o777) == PathStat(is_symlink=True)
    assert PathStat.from_mode(stat.S_IFIFO) == PathStat()
