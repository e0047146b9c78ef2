import io
import zipfile

import pytest

from gridbook.storage import DirStorage, Storage, ZipStorage


def test_storage_is_abstract():
    with pytest.raises(TypeError):
        Storage()


def test_dir_storage_creates_nested_files(tmp_path):
    storage = DirStorage(tmp_path / "out")
    storage.write_blob("/xl/worksheets/Sheet1.xml", b"<worksheet/>")
    storage.write_blob("[Content_Types].xml", b"<Types/>")
    assert (tmp_path / "out" / "xl" / "worksheets" / "Sheet1.xml").read_bytes() == b"<worksheet/>"
    assert (tmp_path / "out" / "[Content_Types].xml").read_bytes() == b"<Types/>"


def test_dir_storage_overwrites(tmp_path):
    storage = DirStorage(str(tmp_path))
    storage.write_blob("a.xml", b"first")
    storage.write_blob("/a.xml", b"second")
    assert (tmp_path / "a.xml").read_bytes() == b"second"


def test_zip_storage_round_trip():
    buf = io.BytesIO()
    storage = ZipStorage(buf)
    storage.write_blob("/xl/workbook.xml", b"<workbook/>")
    storage.write_blob("/xl/media/abc.png", b"\x89PNG")
    storage.close()
    with zipfile.ZipFile(io.BytesIO(buf.getvalue())) as zf:
        assert zf.namelist() == ["xl/workbook.xml", "xl/media/abc.png"]
        assert zf.read("xl/media/abc.png") == b"\x89PNG"


def test_zip_storage_context_manager_writes_file(tmp_path):
    path = tmp_path / "book.xlsx"
    with ZipStorage(path) as storage:
        storage.write_blob("docProps/app.xml", b"<Properties/>")
    with zipfile.ZipFile(path) as zf:
        assert zf.read("docProps/app.xml") == b"<Properties/>"


def test_zip_storage_rejects_write_after_close():
    storage = ZipStorage(io.BytesIO())
    storage.close()
    with pytest.raises(ValueError):
        storage.write_blob("x.xml", b"")