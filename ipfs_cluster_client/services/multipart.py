# ipfs_cluster_client/services/multipart.py
"""
Multipart body construction for POST /add.

Every file becomes one part under the same field name. Directory structure
travels in each part's filename (a relative path); the cluster rebuilds the
tree from those paths.
"""
import logging
import mimetypes
from dataclasses import dataclass
from typing import BinaryIO, Dict, Iterable, List, Optional, Union

from urllib3 import encode_multipart_formdata
from urllib3.fields import RequestField

from ipfs_cluster_client.core.errors import InvalidOption

logger = logging.getLogger(__name__)

FILE_FIELD_NAME = "file"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
CAR_CONTENT_TYPE = "application/vnd.ipld.car"

# Extensions mimetypes does not know about
EXTRA_CONTENT_TYPES = {
    ".car": CAR_CONTENT_TYPE,
}


@dataclass(frozen=True)
class FileWithName:
    """A file to upload: relative name plus bytes or a readable binary file object."""
    name: str
    contents: Union[bytes, bytearray, BinaryIO]
    content_type: Optional[str] = None


@dataclass(frozen=True)
class MultipartBody:
    """An encoded multipart/form-data request body."""
    body: bytes
    content_type: str
    part_count: int

    def headers(self) -> Dict[str, str]:
        return {"Content-Type": self.content_type}


def guess_content_type(filename: str) -> str:
    """
    Infers a part's content type from the filename extension.

    Falls back to application/octet-stream when the extension is unknown.
    """
    lowered = filename.lower()
    for extension, content_type in EXTRA_CONTENT_TYPES.items():
        if lowered.endswith(extension):
            return content_type

    content_type, _ = mimetypes.guess_type(filename)
    return content_type or DEFAULT_CONTENT_TYPE


def _read_contents(contents: Union[bytes, bytearray, BinaryIO]) -> bytes:
    if isinstance(contents, (bytes, bytearray)):
        return bytes(contents)
    if hasattr(contents, "read"):
        data = contents.read()
        if isinstance(data, str):
            raise TypeError("File objects must be opened in binary mode")
        return data
    raise TypeError(f"Unsupported file contents type: {type(contents).__name__}")


def _make_part(file: FileWithName, field_name: str, content_type: Optional[str] = None) -> RequestField:
    part = RequestField(name=field_name, data=_read_contents(file.contents), filename=file.name)
    part.make_multipart(content_type=content_type or file.content_type or guess_content_type(file.name))
    return part


def build_multipart(files: Iterable[FileWithName], field_name: str = FILE_FIELD_NAME) -> MultipartBody:
    """
    Assembles files into a single multipart/form-data body.

    Args:
        files: Files to include, one part each, in order
        field_name: Form field name shared by every part

    Returns:
        The encoded body and its Content-Type (including the boundary)
    """
    parts: List[RequestField] = [_make_part(f, field_name) for f in files]
    body, content_type = encode_multipart_formdata(parts)
    return MultipartBody(body=body, content_type=content_type, part_count=len(parts))


def build_file_body(file: FileWithName) -> MultipartBody:
    return build_multipart([file])


def build_directory_body(files: Iterable[FileWithName]) -> MultipartBody:
    """
    Builds the body for a directory upload.

    Raises:
        InvalidOption: If no files are given.
    """
    files = list(files)
    if not files:
        raise InvalidOption("files", files, "a directory upload needs at least one file")

    logger.debug(f"Building directory upload body with {len(files)} parts")
    return build_multipart(files)


def build_car_body(car: FileWithName) -> MultipartBody:
    """Single-part body for a CAR archive; the part is always typed as a CAR."""
    part = _make_part(car, FILE_FIELD_NAME, content_type=car.content_type or CAR_CONTENT_TYPE)
    body, content_type = encode_multipart_formdata([part])
    return MultipartBody(body=body, content_type=content_type, part_count=1)
