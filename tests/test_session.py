"""Tests for the booth session: lifecycle, settings and end-to-end export."""

import asyncio
import errno
import io
import os

import pytest
from PIL import Image

from stripbooth.exceptions import (
    CameraUnavailableError, CaptureSourceUnavailableError, DecodeError, ExportPreconditionError
)
from stripbooth.models.booth import BoothStage, FilterType, PatternKind, TemplateType
from stripbooth.services.session import BoothSession
from stripbooth.services.slots import Bitmap

from conftest import FakeCamera


def exported_files(booth):
    if not os.path.exists(booth.exporter.exports_dir):
        return []
    return os.listdir(booth.exporter.exports_dir)


class TestLifecycle:

    def test_defaults(self, booth):
        assert booth.stage == BoothStage.idle
        assert booth.template == TemplateType.classic
        assert booth.filter == FilterType.none
        assert booth.flipped is False
        assert booth.border_color == "#D4AF37"
        assert booth.pattern == PatternKind.dots
        assert len(booth.slots) == 3

    def test_start_acquires_camera_once(self, booth, camera):
        booth.start()
        booth.start()
        assert booth.is_active
        assert camera.opens == 1

    def test_start_failure_stays_idle(self, exporter):
        booth = BoothSession(camera=FakeCamera(available=False), exporter=exporter)
        with pytest.raises(CameraUnavailableError):
            booth.start()
        assert booth.stage == BoothStage.idle

    def test_stop_releases_camera_and_resets(self, booth, camera):
        booth.start()
        booth.capture()
        booth.stop()
        assert camera.releases == 1
        assert not camera.is_active
        assert booth.stage == BoothStage.idle
        assert not booth.slots.has_any_content()

    def test_context_exit_releases_on_error(self, booth, camera):
        with pytest.raises(RuntimeError):
            with booth:
                booth.capture()
                raise RuntimeError("torn down")
        assert camera.releases == 1
        assert booth.stage == BoothStage.idle

    def test_capture_requires_active_session(self, booth):
        with pytest.raises(CaptureSourceUnavailableError):
            booth.capture()
        assert not booth.slots.has_any_content()


class TestSettings:

    @pytest.mark.parametrize("template, count", [
        (TemplateType.duo, 2), (TemplateType.classic, 3), (TemplateType.quad, 4)
    ])
    def test_template_replaces_slots(self, booth, template, count):
        booth.start()
        booth.capture()
        booth.select_template(template)
        assert booth.slots.snapshot() == (None,) * count

    def test_clear_all_equals_fresh_template(self, booth):
        booth.start()
        booth.select_template(TemplateType.quad)
        booth.capture()
        booth.capture()
        booth.clear_all()
        assert booth.slots.snapshot() == (None,) * 4

    def test_toggle_flip(self, booth):
        assert booth.toggle_flip() is True
        assert booth.toggle_flip() is False

    def test_plain_values_accepted(self, booth):
        booth.select_filter("sepia")
        booth.select_pattern("hearts")
        booth.select_template("duo")
        assert booth.filter == FilterType.sepia
        assert booth.pattern == PatternKind.hearts
        assert len(booth.slots) == 2


class TestExport:

    def test_rejected_when_all_empty(self, booth):
        booth.start()
        with pytest.raises(ExportPreconditionError):
            asyncio.run(booth.export())
        assert exported_files(booth) == []

    def test_partial_strip_exports_one_file(self, booth):
        booth.start()
        booth.capture()
        result = asyncio.run(booth.export())
        assert exported_files(booth) == [result.filename]
        assert booth.slots.empty_count() == 2

    @pytest.mark.parametrize("portrait, frame_height", [(False, 350), (True, 528)])
    def test_duo_end_to_end(self, booth, portrait, frame_height):
        booth.start()
        booth.select_template(TemplateType.duo)
        booth.select_pattern(PatternKind.stars)
        assert booth.capture().index == 0
        assert booth.capture().index == 1
        assert not booth.capture().captured

        result = asyncio.run(booth.export(portrait=portrait))
        image = Image.open(io.BytesIO(result.data))
        assert image.format == "PNG"
        assert image.size == (500, 200 + 2 * (frame_height + 80))
        assert exported_files(booth) == [result.filename]

    def test_decode_failure_saves_nothing(self, booth):
        booth.start()
        booth.capture()
        booth.slots.set(1, Bitmap(png=b"junk", width=4, height=4))
        with pytest.raises(DecodeError) as excinfo:
            asyncio.run(booth.export())
        assert excinfo.value.index == 1
        assert exported_files(booth) == []
        assert booth.slots.empty_count() == 1

    def test_failed_save_saves_nothing(self, booth, monkeypatch):
        def refuse(src, dst):
            raise OSError(errno.ENOSPC, "No space left on device")

        booth.start()
        booth.capture()
        monkeypatch.setattr(os, "replace", refuse)
        with pytest.raises(OSError):
            asyncio.run(booth.export())
        assert exported_files(booth) == []
