import io
import struct

import pytest

from lzpack_core.errors import ArchiveError, FormatError, MagicByteMismatch
from lzpack_archive.archive import collect_files, pack_folder, unpack_archive


def make_tree(root):
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "a.txt").write_bytes(b"hello hello hello hello")
    (root / "sub" / "b.bin").write_bytes(b"\x00" * 700 + bytes(range(256)))
    (root / "sub" / "deeper" / "c.txt").write_bytes(b"ABABABABABAB")
    (root / "empty").write_bytes(b"")
    return root


@pytest.mark.parametrize("algorithm", ["lz", "rle"])
def test_pack_unpack_round_trip(tmp_path, algorithm):
    src = make_tree(tmp_path / "src")
    buf = io.BytesIO()
    assert pack_folder(src, buf, algorithm) == 4

    buf.seek(0)
    written = unpack_archive(buf, tmp_path / "out")
    assert [p.relative_to(tmp_path / "out").as_posix() for p in written] == [
        "a.txt", "empty", "sub/b.bin", "sub/deeper/c.txt",
    ]
    for rel, p in collect_files(src):
        assert (tmp_path / "out" / rel).read_bytes() == p.read_bytes()


def test_pack_is_deterministic(tmp_path):
    src = make_tree(tmp_path / "src")
    a, b = io.BytesIO(), io.BytesIO()
    pack_folder(src, a)
    pack_folder(src, b)
    assert a.getvalue() == b.getvalue()


def test_empty_folder_warns(tmp_path):
    (tmp_path / "nothing").mkdir()
    buf = io.BytesIO()
    with pytest.warns(UserWarning, match="No files"):
        assert pack_folder(tmp_path / "nothing", buf) == 0
    assert buf.getvalue() == struct.pack("<BI", 0x4C, 0)


def test_explicit_algorithm_must_match(tmp_path):
    src = make_tree(tmp_path / "src")
    buf = io.BytesIO()
    pack_folder(src, buf, "rle")
    buf.seek(0)
    with pytest.raises(MagicByteMismatch):
        unpack_archive(buf, tmp_path / "out", "lz")


def member(path: bytes, stream: bytes) -> bytes:
    return struct.pack("<H", len(path)) + path + struct.pack("<I", len(stream)) + stream


@pytest.mark.parametrize("path", [b"../evil", b"/etc/evil", b"", b".", b"./", b"a/\x00b", b"a/../../evil"])
def test_unsafe_member_paths_rejected(tmp_path, path):
    data = struct.pack("<BI", 0x4C, 1) + member(path, b"\x4c")
    with pytest.raises(ArchiveError):
        unpack_archive(io.BytesIO(data), tmp_path / "out")
    assert not (tmp_path / "evil").exists()


def test_member_stream_must_match_header(tmp_path):
    data = struct.pack("<BI", 0x4C, 1) + member(b"x", b"\x52A\x01")
    with pytest.raises(ArchiveError):
        unpack_archive(io.BytesIO(data), tmp_path / "out")


def test_truncated_archive(tmp_path):
    src = make_tree(tmp_path / "src")
    buf = io.BytesIO()
    pack_folder(src, buf)
    whole = buf.getvalue()

    with pytest.raises(ArchiveError):
        unpack_archive(io.BytesIO(whole[:3]), tmp_path / "o1")
    with pytest.raises(ArchiveError):
        unpack_archive(io.BytesIO(whole[:-1]), tmp_path / "o2")


def test_corrupt_member_raises_format_error(tmp_path):
    data = struct.pack("<BI", 0x4C, 1) + member(b"x", b"\x4c\x01\x05\x03")
    with pytest.raises(FormatError):
        unpack_archive(io.BytesIO(data), tmp_path / "out")
    assert not (tmp_path / "out" / "x").exists()


def test_trailing_bytes_warn(tmp_path):
    data = struct.pack("<BI", 0x4C, 1) + member(b"x", b"\x4c\x00A") + b"junk"
    with pytest.warns(UserWarning, match="Trailing"):
        unpack_archive(io.BytesIO(data), tmp_path / "out")
    assert (tmp_path / "out" / "x").read_bytes() == b"A"
