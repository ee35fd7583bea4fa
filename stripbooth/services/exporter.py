import io
import logging
import os
import tempfile
import time
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from PIL import Image

from stripbooth.config import settings

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    data: bytes
    filename: str
    path: Optional[str] = None


class Exporter:
    def __init__(self, exports_dir: str = None):
        self.exports_dir = exports_dir or settings.exports_dir
        self._last_stamp = 0

    def _next_stamp(self) -> int:
        stamp = max(int(time.time() * 1000), self._last_stamp + 1)
        self._last_stamp = stamp
        return stamp

    def export(self, image: Image.Image) -> ExportResult:
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return ExportResult(data=buffer.getvalue(), filename=f"photobooth-{self._next_stamp()}.png")

    def save(self, result: ExportResult) -> str:
        os.makedirs(self.exports_dir, exist_ok=True)
        filepath = os.path.join(self.exports_dir, result.filename)

        # A failed write must never leave a partial strip under its final name
        fd, tmp_path = tempfile.mkstemp(prefix=".photobooth-", suffix=".tmp", dir=self.exports_dir)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(result.data)
            os.replace(tmp_path, filepath)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

        result.path = filepath
        logger.info("Saved strip %s (%d bytes)", filepath, len(result.data))
        return filepath

    def resolve(self, filename: str) -> Optional[str]:
        """Path of a previously exported strip, or None for unknown names."""
        if os.path.basename(filename) != filename or not filename.lower().endswith(".png"):
            return None
        filepath = os.path.join(self.exports_dir, filename)
        return filepath if os.path.isfile(filepath) else None

    def list_exports(self) -> List[dict]:
        strips = []
        if os.path.exists(self.exports_dir):
            for filename in os.listdir(self.exports_dir):
                if filename.lower().endswith(".png"):
                    stat = os.stat(os.path.join(self.exports_dir, filename))
                    strips.append({
                        "filename": filename,
                        "size": stat.st_size,
                        "created": datetime.fromtimestamp(stat.st_mtime).isoformat(),
                        "download_url": f"/api/strips/{filename}"
                    })
        return sorted(strips, key=lambda x: x["created"], reverse=True)
