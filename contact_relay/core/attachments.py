"""
Attachment storage for contact form uploads.
Files are written to the uploads directory as <epoch-ms>-<sanitized name>
and described by Attachment records that are embedded in the submission.
"""

import logging
import os
import re
import time
from typing import List, Sequence

from fastapi import UploadFile

from contact_relay.models.submission import Attachment

# Set up logger
logger = logging.getLogger(__name__)

MAX_FILES = 5
MAX_FILE_SIZE = 10 * 1024 * 1024
CHUNK_SIZE = 64 * 1024

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


class AttachmentError(Exception):
    """Upload rejected because it breaks one of the upload limits"""


class TooManyFilesError(AttachmentError):
    pass


class FileTooLargeError(AttachmentError):
    pass


def epoch_ms() -> int:
    return int(time.time() * 1000)


def sanitize_filename(name: str) -> str:
    """Replace every character outside [A-Za-z0-9._-] with an underscore"""
    safe_name = _UNSAFE_CHARS.sub("_", name or "")
    return safe_name or "upload"


class AttachmentStore:
    def __init__(self, directory: str, max_files: int = MAX_FILES, max_file_size: int = MAX_FILE_SIZE):
        self.directory = directory
        self.max_files = max_files
        self.max_file_size = max_file_size

    def ensure_directory(self):
        os.makedirs(self.directory, exist_ok=True)

    def check_count(self, uploads: Sequence[UploadFile]):
        if len(uploads) > self.max_files:
            raise TooManyFilesError(
                f"{len(uploads)} files uploaded, at most {self.max_files} are accepted"
            )

    def _open_unique(self, safe_name: str):
        """
        Create the target file exclusively.
        Two uploads with the same name in the same millisecond get consecutive
        timestamps instead of overwriting each other.
        """
        stamp = epoch_ms()
        while True:
            filename = f"{stamp}-{safe_name}"
            path = os.path.join(self.directory, filename)
            try:
                return filename, path, open(path, "xb")
            except FileExistsError:
                stamp += 1

    async def save(self, upload: UploadFile) -> Attachment:
        """
        Stream one upload to disk and return its metadata.

        Raises:
            FileTooLargeError: the upload is bigger than max_file_size; the
                partial file is removed.
            OSError: the file could not be written.
        """
        self.ensure_directory()
        original_name = upload.filename or ""
        filename, path, handle = self._open_unique(sanitize_filename(original_name))

        size = 0
        try:
            with handle:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_file_size:
                        raise FileTooLargeError(
                            f"'{original_name}' exceeds the {self.max_file_size} byte limit"
                        )
                    handle.write(chunk)
        except Exception:
            os.remove(path)
            raise

        logger.info(f"Stored attachment '{original_name}' as {filename} ({size} bytes)")
        return Attachment(
            originalname=original_name,
            filename=filename,
            path=path,
            mimetype=upload.content_type or "application/octet-stream",
            size=size,
        )

    async def save_all(self, uploads: Sequence[UploadFile]) -> List[Attachment]:
        """Save every upload in order; if one fails, the ones already written are removed"""
        self.check_count(uploads)
        saved = []
        try:
            for upload in uploads:
                saved.append(await self.save(upload))
        except Exception:
            for attachment in saved:
                os.remove(attachment.path)
            raise
        return saved
