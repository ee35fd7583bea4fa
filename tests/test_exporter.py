"""Tests for PNG export and saved-strip lookup."""

import errno
import io
import os
import re

import pytest
from PIL import Image

from stripbooth.services.exporter import Exporter


def strip_image():
    return Image.new("RGB", (50, 80), "navy")


class TestExport:

    def test_encodes_lossless_png(self, exporter):
        image = strip_image()
        result = exporter.export(image)
        assert result.data.startswith(b"\x89PNG")
        decoded = Image.open(io.BytesIO(result.data))
        assert decoded.size == (50, 80)
        assert decoded.convert("RGB").tobytes() == image.tobytes()

    def test_filename_carries_timestamp(self, exporter):
        assert re.fullmatch(r"photobooth-\d{13,}\.png", exporter.export(strip_image()).filename)

    def test_repeated_exports_get_unique_names(self, exporter):
        names = {exporter.export(strip_image()).filename for _ in range(5)}
        assert len(names) == 5

    def test_export_does_not_touch_disk(self, exporter):
        exporter.export(strip_image())
        assert not os.path.exists(exporter.exports_dir)


class TestSave:

    def test_save_writes_one_file(self, exporter):
        result = exporter.export(strip_image())
        path = exporter.save(result)
        assert result.path == path
        assert os.listdir(exporter.exports_dir) == [result.filename]
        with open(path, "rb") as f:
            assert f.read() == result.data

    def test_resolve_and_list(self, exporter):
        result = exporter.export(strip_image())
        exporter.save(result)
        assert exporter.resolve(result.filename) == result.path
        listed = exporter.list_exports()
        assert [entry["filename"] for entry in listed] == [result.filename]
        assert listed[0]["download_url"] == f"/api/strips/{result.filename}"

    def test_resolve_rejects_unknown_and_traversal(self, exporter):
        assert exporter.resolve("photobooth-1.png") is None
        assert exporter.resolve("../secret.png") is None
        assert exporter.resolve("notes.txt") is None

    def test_list_without_directory(self, tmp_path):
        assert Exporter(exports_dir=str(tmp_path / "missing")).list_exports() == []


class TestFailedSave:

    @pytest.fixture
    def short_write(self, monkeypatch):
        real_fdopen = os.fdopen

        class ShortFile:
            def __init__(self, handle):
                self.handle = handle

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                self.handle.close()
                return False

            def write(self, data):
                self.handle.write(data[: len(data) // 2])
                raise OSError(errno.ENOSPC, "No space left on device")

        monkeypatch.setattr(os, "fdopen", lambda fd, mode: ShortFile(real_fdopen(fd, mode)))

    def test_partial_write_leaves_nothing(self, exporter, short_write):
        result = exporter.export(strip_image())
        with pytest.raises(OSError):
            exporter.save(result)
        assert os.listdir(exporter.exports_dir) == []
        assert exporter.list_exports() == []
        assert exporter.resolve(result.filename) is None
        assert result.path is None

    def test_failed_rename_leaves_nothing(self, exporter, monkeypatch):
        def refuse(src, dst):
            raise OSError(errno.EIO, "I/O error")

        monkeypatch.setattr(os, "replace", refuse)
        with pytest.raises(OSError):
            exporter.save(exporter.export(strip_image()))
        assert os.listdir(exporter.exports_dir) == []
