# artmarket/routers/uploads.py
from fastapi import UploadFile

from artmarket.core.errors import InvalidArgument


def read_upload(file: UploadFile | None) -> tuple[str, bytes] | None:
    """
    Turn an optional multipart file into (content_type, bytes).
    """
    if file is None:
        return None
    if not file.content_type:
        raise InvalidArgument("Missing content-type for uploaded file")
    return file.content_type, file.file.read()


def read_uploads(files: list[UploadFile] | None) -> list[tuple[str, bytes]]:
    return [read_upload(f) for f in files or []]
