"""Multipart upload helpers."""

from fastapi import UploadFile

from fieldops.application.ports.file_storage_port import FileUpload


async def to_file_upload(upload: UploadFile) -> FileUpload:
    data = await upload.read()
    return FileUpload(
        name=upload.filename or "file",
        data=data,
        content_type=upload.content_type,
    )


async def to_file_uploads(uploads: list[UploadFile] | None) -> list[FileUpload]:
    # Browsers send an empty part when no file was picked
    return [await to_file_upload(u) for u in uploads or [] if u.filename]
