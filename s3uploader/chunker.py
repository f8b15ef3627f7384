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
s3uploader.chunker
~~~~~~~~~~~~~~~~~~

This module re-slices a stream of arbitrary sized fragments into chunks
of requested sizes.

:copyright: (c) 2017, 2025 by MinIO, Inc.
:license: Apache 2.0, see LICENSE for more details.

"""

from __future__ import absolute_import, annotations

from typing import BinaryIO, Iterable, Iterator, Optional, Union

from .helpers import read_part_data


class Chunker:
    """
    Chunker pulls data from *source* and hands out one chunk per size in
    *sizes*, in order. Each chunk is exactly of the requested size except
    when the source ends early; then the last chunk carries whatever data
    was left and no further chunks are produced.

    :param source: Object with callable ``read()`` or iterable of bytes.
    :param sizes: Chunk sizes in bytes.
    """

    def __init__(
            self,
            source: Union[BinaryIO, Iterable[bytes]],
            sizes: Iterable[int],
    ):
        self._reader: Optional[BinaryIO] = None
        self._fragments: Optional[Iterator[bytes]] = None
        if callable(getattr(source, "read", None)):
            self._reader = source  # type: ignore[assignment]
        else:
            self._fragments = iter(source)  # type: ignore[arg-type]
        self._sizes = iter(sizes)
        self._buffer = bytearray()
        self._eof = False
        self._bytes_read = 0

    @property
    def bytes_read(self) -> int:
        """Get total length of chunks handed out so far."""
        return self._bytes_read

    def _fill(self, size: int):
        """Buffer fragments until *size* bytes are available or EOF."""
        fragments = self._fragments
        if fragments is None:
            return
        while len(self._buffer) < size:
            try:
                data = next(fragments)
            except StopIteration:
                self._eof = True
                return
            if not isinstance(data, bytes):
                raise ValueError("source must produce 'bytes' objects")
            self._buffer += data

    def next_chunk(self) -> Optional[bytes]:
        """
        Return next chunk, or None when either sizes or source are
        exhausted.
        """
        if self._eof and not self._buffer:
            return None
        size = next(self._sizes, None)
        if size is None:
            return None

        if self._reader is not None:
            chunk = read_part_data(self._reader, size)
            if len(chunk) < size:
                self._eof = True
        else:
            self._fill(size)
            chunk = bytes(self._buffer[:size])
            del self._buffer[:size]

        if not chunk:
            self._eof = True
            return None
        self._bytes_read += len(chunk)
        return chunk
