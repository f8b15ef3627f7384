# -*- coding: utf-8 -*-
# S3 Uploader Library for Amazon S3 Compatible Cloud Storage, (C)
# 2020, 2025 MinIO, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Object sources, part payloads and multipart upload records.
"""

from __future__ import absolute_import, annotations

from dataclasses import dataclass
from typing import BinaryIO, Iterable, Optional, Union

from typing_extensions import Protocol

from .error import ShortSourceError
from .helpers import read_part_data


@dataclass(frozen=True)
class FileSource:
    """
    Object data from a file path.

    ``length``, when given, is used instead of the size found on disk. It
    is useful when the size cannot be determined automatically, or when
    only a prefix of the file is to be uploaded.
    """
    file_path: str
    length: Optional[int] = None


@dataclass(frozen=True)
class StreamSource:
    """
    Object data from a stream.

    ``data`` is either an object with a callable ``read()`` returning bytes
    or an iterable of bytes fragments. ``length``, when given, limits the
    input; otherwise upload continues until the stream ends or the object
    reaches maximum object size.
    """
    data: Union[BinaryIO, Iterable[bytes]]
    length: Optional[int] = None


ObjectSource = Union[FileSource, StreamSource]


@dataclass(frozen=True)
class UploadSession:
    """Multipart upload in progress."""
    bucket_name: str
    object_name: str
    upload_id: str


@dataclass(frozen=True)
class Part:
    """Part information of a multipart upload."""
    part_number: int
    etag: str


class BytesPayload:
    """Part payload held in memory."""

    def __init__(self, data: bytes):
        self._data = data

    @property
    def length(self) -> int:
        """Get payload length."""
        return len(self._data)

    def read(self) -> bytes:
        """Get payload data."""
        return self._data


class FilePayload:
    """
    Part payload of ``length`` bytes at ``offset`` of an open file. The
    file handle is owned by the caller and must not be shared with other
    threads while the payload is read.
    """

    def __init__(self, file: BinaryIO, offset: int, length: int):
        self._file = file
        self._offset = offset
        self._length = length

    @property
    def offset(self) -> int:
        """Get offset in file."""
        return self._offset

    @property
    def length(self) -> int:
        """Get payload length."""
        return self._length

    def read(self) -> bytes:
        """Read payload data from file."""
        self._file.seek(self._offset)
        data = read_part_data(self._file, self._length)
        if len(data) != self._length:
            raise ShortSourceError(self._length, len(data))
        return data


Payload = Union[BytesPayload, FilePayload]


class ObjectStore(Protocol):
    """typing stub for storage operations used by uploads."""

    def create_multipart_upload(
            self, bucket_name: str, object_name: str,
    ) -> str:
        """Start multipart upload and return its upload ID."""

    def upload_part(
            self,
            bucket_name: str,
            object_name: str,
            upload_id: str,
            part_number: int,
            payload: Payload,
    ) -> str:
        """Upload one part and return its ETag."""

    def complete_multipart_upload(
            self,
            bucket_name: str,
            object_name: str,
            upload_id: str,
            parts: list[Part],
    ) -> str:
        """Assemble uploaded parts and return object ETag."""

    def put_object(
            self, bucket_name: str, object_name: str, payload: Payload,
    ) -> str:
        """Upload whole object in one request and return its ETag."""
