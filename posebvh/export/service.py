"""
Request handling for BVH downloads.

Framework-agnostic counterpart of a ``POST /saveBVH`` endpoint: takes the
decoded request body, builds the document, stages it as a transient file,
hands it to the transport for delivery and cleans up afterwards.
"""

import json
import logging
import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Union

from posebvh.config import ExportConfig
from posebvh.core.frames import FrameFormatError, parse_frames
from posebvh.export.bvh_export import BVHExporter, EmptyInputError, ExportWriteError

logger = logging.getLogger(__name__)

# deliver(path, download_name) sends the staged file to the client
Deliver = Callable[[Path, str], None]

MSG_NO_FRAMES = "No frames"
MSG_WRITE_FAILED = "Failed to write BVH file on server."
MSG_DELIVERY_FAILED = "Could not download the file."


@dataclass
class ExportResponse:
    """Outcome of an export request, in HTTP terms."""

    status: int
    message: str = ""
    filename: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class ExportService:
    """
    Serves BVH exports as downloadable files.

    Each request gets its own frames, document and transient file, so one
    service instance can be shared by concurrent requests.
    """

    def __init__(
        self,
        config: Optional[ExportConfig] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the export service.

        Args:
            config: Export settings (frame rate, scale, staging directory)
            clock: Source of the current time in seconds, used for file names
        """
        self.config = config or ExportConfig()
        self.exporter = BVHExporter.from_config(self.config)
        self._clock = clock

    def make_filename(self) -> str:
        """Generate a download name like ``motion_capture_1718000000000.bvh``."""
        timestamp_ms = int(self._clock() * 1000)
        return f"{self.config.filename_prefix}_{timestamp_ms}.bvh"

    def handle(self, payload: Any, deliver: Deliver) -> ExportResponse:
        """
        Handle a decoded request body.

        Args:
            payload: ``{"frames": [...]}`` or a bare list of frames
            deliver: Callable that streams the staged file to the client

        Returns:
            400 for missing or malformed frames, 500 for write or delivery
            failures, 200 once the file has been delivered
        """
        try:
            frames = parse_frames(payload)
        except FrameFormatError as e:
            logger.warning(f"Rejected export request: {e}")
            return ExportResponse(400, str(e))

        if not frames:
            logger.warning("Rejected export request: no frames")
            return ExportResponse(400, MSG_NO_FRAMES)

        try:
            document = self.exporter.build(frames)
        except EmptyInputError:
            return ExportResponse(400, MSG_NO_FRAMES)
        except ValueError as e:
            logger.error(f"Invalid export settings: {e}")
            return ExportResponse(500, MSG_WRITE_FAILED)

        filename = self.make_filename()

        try:
            out_path = self._stage(document, filename)
        except ExportWriteError as e:
            logger.error(f"Error saving BVH: {e}")
            return ExportResponse(500, MSG_WRITE_FAILED)

        try:
            deliver(out_path, filename)
        except Exception as e:
            logger.error(f"Error sending file: {e}")
            return ExportResponse(500, MSG_DELIVERY_FAILED, filename)
        finally:
            self._cleanup(out_path)

        return ExportResponse(200, "OK", filename)

    def handle_json(self, body: Union[str, bytes], deliver: Deliver) -> ExportResponse:
        """Handle a raw JSON request body."""
        try:
            payload = json.loads(body)
        except (ValueError, UnicodeDecodeError) as e:
            logger.warning(f"Rejected export request: invalid JSON ({e})")
            return ExportResponse(400, "Invalid JSON")

        return self.handle(payload, deliver)

    def _stage(self, document: str, filename: str) -> Path:
        """
        Write the document to a file of its own in the staging directory.

        Requests made in the same millisecond share a download name, so the
        staged file gets a unique name derived from it.
        """
        output_dir = Path(self.config.output_dir)
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            fd, staged = tempfile.mkstemp(
                prefix=f"{Path(filename).stem}_", suffix=".bvh", dir=output_dir
            )
        except OSError as e:
            raise ExportWriteError(f"Failed to stage BVH file in {output_dir}: {e}") from e

        staged_path = Path(staged)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(document)
        except OSError as e:
            self._cleanup(staged_path)
            raise ExportWriteError(f"Failed to write BVH file {staged_path}: {e}") from e

        logger.info(f"Staged {filename} at {staged_path}")
        return staged_path

    @staticmethod
    def _cleanup(path: Path) -> None:
        try:
            path.unlink()
        except OSError as e:
            logger.warning(f"Failed to delete local file {path}: {e}")
