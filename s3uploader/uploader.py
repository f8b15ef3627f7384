# -*- coding: utf-8 -*-
# S3 Uploader Library for Amazon S3 Compatible Cloud Storage, (C)
# 2017, 2025 MinIO, Inc.
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
Upload objects of any size from files or streams, choosing between a
single PUT, sequential multipart upload and parallel multipart upload.
"""

from __future__ import absolute_import, annotations

import logging
import os
import stat
from collections import abc
from typing import Any, BinaryIO, Iterable, Optional, Union

from .chunker import Chunker
from .datatypes import (BytesPayload, FilePayload, FileSource, ObjectSource,
                        ObjectStore, Part, Payload, StreamSource,
                        UploadSession)
from .error import PartUploadError, SizeExceededError
from .helpers import (MAX_OBJECT_SIZE, PARALLEL_UPLOADS, SINGLE_PUT_THRESHOLD,
                      PartInfo, ThreadPool, check_non_empty_string,
                      select_part_sizes)

_LOGGER = logging.getLogger(__name__)


def _probe_file(file_path: str) -> tuple[bool, Optional[int]]:
    """
    Find whether file is seekable and its size. Failures are reported as
    not seekable and unknown size.
    """
    try:
        file = open(file_path, "rb")  # pylint: disable=consider-using-with
    except OSError:
        return False, None

    with file:
        try:
            seekable = file.seekable()
        except (OSError, ValueError):
            seekable = False

        size = None
        try:
            stat_result = os.fstat(file.fileno())
            # Pipes and devices report meaningless sizes.
            if stat.S_ISREG(stat_result.st_mode):
                size = stat_result.st_size
        except (OSError, ValueError):
            pass

    return seekable, size


def _is_stream_data(data: Any) -> bool:
    """Check whether data is a reader or an iterable of bytes fragments."""
    if callable(getattr(data, "read", None)):
        return True
    # bytes and str are iterable but yield ints and characters.
    if isinstance(data, (bytes, bytearray, memoryview, str)):
        return False
    return isinstance(data, abc.Iterable)


class Uploader:
    """
    Upload objects to an S3 compatible store.

    Objects up to 64MiB are uploaded by a single PUT. Larger files with
    known size on a seekable file system are uploaded by multipart upload
    running parts in parallel; streams and files of unknown size are
    uploaded part by part in order.
    """
    _store: ObjectStore
    _num_parallel_uploads: int

    def __init__(
            self,
            store: ObjectStore,
            num_parallel_uploads: int = PARALLEL_UPLOADS,
    ):
        """
        Initializes a new Uploader object.

        Args:
            store (ObjectStore):
                Storage operations to upload with, for example
                :class:`s3uploader.S3Client`.

            num_parallel_uploads (int, default=10):
                Number of parts uploaded in parallel for seekable files.

        Example:
            >>> from s3uploader import S3Client, Uploader
            >>> uploader = Uploader(S3Client("localhost:9000", secure=False))
        """
        if num_parallel_uploads < 1:
            raise ValueError("num_parallel_uploads must be at least 1")
        self._store = store
        self._num_parallel_uploads = num_parallel_uploads

    def put_object(
            self,
            bucket_name: str,
            object_name: str,
            source: ObjectSource,
    ) -> str:
        """
        Upload data from a file or stream to an object in a bucket.

        Args:
            bucket_name (str):
                Name of the bucket.

            object_name (str):
                Object name in the bucket.

            source (ObjectSource):
                :class:`FileSource` or :class:`StreamSource` to read object
                data from.

        Returns:
            str:
                ETag of the created object.

        Raises:
            SizeExceededError:
                If object size is more than 5TiB. No request is made.

            PartUploadError:
                If any part fails to upload. The multipart upload is not
                aborted.

        Example:
            >>> # Upload a file
            >>> etag = uploader.put_object(
            ...     "my-bucket", "my-object", FileSource("my-filename"),
            ... )
            >>>
            >>> # Upload first 1MiB of a file
            >>> etag = uploader.put_object(
            ...     "my-bucket", "my-object",
            ...     FileSource("my-filename", length=1024*1024),
            ... )
            >>>
            >>> # Upload unknown-sized data
            >>> with urlopen("https://cdn.kernel.org/pub/linux/kernel/v5.x/"
            ...              "linux-5.4.81.tar.xz") as data:
            ...     etag = uploader.put_object(
            ...         "my-bucket", "my-object", StreamSource(data),
            ...     )
        """
        check_non_empty_string(bucket_name, "bucket name")
        check_non_empty_string(object_name, "object name")
        if not isinstance(source, (FileSource, StreamSource)):
            raise TypeError("source must be FileSource or StreamSource type")
        if source.length is not None and source.length < 0:
            raise ValueError(f"invalid length {source.length}")

        if isinstance(source, StreamSource):
            if not _is_stream_data(source.data):
                raise TypeError(
                    "stream data must have callable read() or be an "
                    "iterable of bytes",
                )
            if source.length is not None and source.length > MAX_OBJECT_SIZE:
                raise SizeExceededError(source.length, MAX_OBJECT_SIZE)
            return self._sequential_multipart_upload(
                bucket_name, object_name, source.length, source.data,
            )

        file_path = source.file_path
        seekable, file_size = _probe_file(file_path)
        size = file_size if source.length is None else source.length

        if size is None:
            # Unable to get size, so assume non-seekable file of maximum
            # object size.
            with open(file_path, "rb") as file:
                return self._sequential_multipart_upload(
                    bucket_name, object_name, MAX_OBJECT_SIZE, file,
                )

        if size <= SINGLE_PUT_THRESHOLD:
            _LOGGER.debug(
                "single upload of %s/%s; size: %d",
                bucket_name, object_name, size,
            )
            with open(file_path, "rb") as file:
                return self._store.put_object(
                    bucket_name, object_name, FilePayload(file, 0, size),
                )

        if size > MAX_OBJECT_SIZE:
            raise SizeExceededError(size, MAX_OBJECT_SIZE)

        if seekable:
            return self._parallel_multipart_upload(
                bucket_name, object_name, file_path, size,
            )

        with open(file_path, "rb") as file:
            return self._sequential_multipart_upload(
                bucket_name, object_name, size, file,
            )

    def fput_object(
            self,
            bucket_name: str,
            object_name: str,
            file_path: str,
            length: Optional[int] = None,
    ) -> str:
        """
        Upload data from a file to an object in a bucket. This is a
        shortcut of ``put_object()`` with :class:`FileSource`.
        """
        return self.put_object(
            bucket_name, object_name, FileSource(file_path, length),
        )

    def _create_session(
            self, bucket_name: str, object_name: str,
    ) -> UploadSession:
        """Start a new multipart upload."""
        upload_id = self._store.create_multipart_upload(
            bucket_name, object_name,
        )
        return UploadSession(bucket_name, object_name, upload_id)

    def _upload_part(
            self,
            session: UploadSession,
            part_number: int,
            payload: Payload,
    ) -> Part:
        """Upload a part."""
        _LOGGER.debug(
            "upload part %d of %s/%s; upload ID: %s, size: %d",
            part_number, session.bucket_name, session.object_name,
            session.upload_id, payload.length,
        )
        etag = self._store.upload_part(
            session.bucket_name,
            session.object_name,
            session.upload_id,
            part_number,
            payload,
        )
        return Part(part_number=part_number, etag=etag)

    def _complete(self, session: UploadSession, parts: list[Part]) -> str:
        """Complete multipart upload with uploaded parts."""
        _LOGGER.debug(
            "complete multipart upload of %s/%s; upload ID: %s, parts: %d",
            session.bucket_name, session.object_name, session.upload_id,
            len(parts),
        )
        return self._store.complete_multipart_upload(
            session.bucket_name,
            session.object_name,
            session.upload_id,
            parts,
        )

    def _sequential_multipart_upload(
            self,
            bucket_name: str,
            object_name: str,
            length: Optional[int],
            data: Union[BinaryIO, Iterable[bytes]],
    ) -> str:
        """
        Upload multipart object from stream part by part. Upload stops
        when either planned parts or data run out.
        """
        part_infos = select_part_sizes(
            MAX_OBJECT_SIZE if length is None else length,
        )
        _LOGGER.debug(
            "sequential multipart upload of %s/%s; size: %s, parts: %d",
            bucket_name, object_name,
            "unknown" if length is None else length, len(part_infos),
        )
        session = self._create_session(bucket_name, object_name)

        chunker = Chunker(data, [info.length for info in part_infos])
        parts: list[Part] = []
        for info in part_infos:
            try:
                chunk = chunker.next_chunk()
                if chunk is None:
                    break
                parts.append(
                    self._upload_part(
                        session, info.part_number, BytesPayload(chunk),
                    ),
                )
            except Exception as exc:
                raise PartUploadError(info.part_number, exc) from exc

        if not parts:
            # Empty source; S3 requires at least one part.
            try:
                parts.append(self._upload_part(session, 1, BytesPayload(b"")))
            except Exception as exc:
                raise PartUploadError(1, exc) from exc

        _LOGGER.debug(
            "read %d bytes for %s/%s", chunker.bytes_read,
            bucket_name, object_name,
        )
        return self._complete(session, parts)

    def _upload_file_part(
            self,
            session: UploadSession,
            file_path: str,
            info: PartInfo,
    ) -> Part:
        """Upload_part task for ThreadPool; opens its own file handle."""
        with open(file_path, "rb") as file:
            return self._upload_part(
                session,
                info.part_number,
                FilePayload(file, info.offset, info.length),
            )

    def _parallel_multipart_upload(
            self,
            bucket_name: str,
            object_name: str,
            file_path: str,
            size: int,
    ) -> str:
        """Upload multipart object from seekable file in parallel."""
        session = self._create_session(bucket_name, object_name)
        part_infos = select_part_sizes(size)
        _LOGGER.debug(
            "parallel multipart upload of %s/%s; size: %d, parts: %d",
            bucket_name, object_name, size, len(part_infos),
        )

        pool = ThreadPool(min(self._num_parallel_uploads, len(part_infos)))
        pool.start_parallel()
        for info in part_infos:
            pool.add_task(self._upload_file_part, session, file_path, info)
        results = pool.result()

        # If there were any errors, rethrow the first one.
        for info, (_, exc) in zip(part_infos, results):
            if exc is not None:
                raise PartUploadError(info.part_number, exc) from exc

        return self._complete(session, [part for part, _ in results])
