# -*- coding: utf-8 -*-
# S3 Uploader Library for Amazon S3 Compatible Cloud Storage,
# (C) 2015-2019, 2025 MinIO, Inc.
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
s3uploader.error
~~~~~~~~~~~~~~~~

This module provides custom exception classes for upload failures and
S3 API specific errors.

:copyright: (c) 2015, 2016, 2017, 2025 by MinIO, Inc.
:license: Apache 2.0, see LICENSE for more details.

"""

from __future__ import absolute_import, annotations

from typing import Optional, Type, TypeVar
from xml.etree import ElementTree as ET

try:
    from urllib3.response import BaseHTTPResponse  # type: ignore[attr-defined]
except ImportError:
    from urllib3.response import HTTPResponse as BaseHTTPResponse

from .xml import findtext


class UploaderException(Exception):
    """Base uploader exception."""


class SizeExceededError(UploaderException):
    """Raised to indicate object size is more than allowed maximum."""

    def __init__(self, size: int, max_size: int):
        self._size = size
        self._max_size = max_size
        super().__init__(
            f"object size {size} is not supported; "
            f"maximum allowed {max_size} bytes"
        )

    @property
    def size(self) -> int:
        """Get rejected object size."""
        return self._size

    def __reduce__(self):
        return type(self), (self._size, self._max_size)


class ShortSourceError(UploaderException):
    """Raised to indicate data source ended before expected length."""

    def __init__(self, expected: int, got: int):
        self._expected = expected
        self._got = got
        super().__init__(
            f"source having not enough data; "
            f"expected: {expected}, got: {got} bytes"
        )

    @property
    def expected(self) -> int:
        """Get expected length."""
        return self._expected

    @property
    def got(self) -> int:
        """Get length actually read."""
        return self._got

    def __reduce__(self):
        return type(self), (self._expected, self._got)


class PartUploadError(UploaderException):
    """Raised to indicate upload of a part failed."""

    def __init__(self, part_number: int, cause: BaseException):
        self._part_number = part_number
        self._cause = cause
        super().__init__(f"upload of part {part_number} failed; {cause}")

    @property
    def part_number(self) -> int:
        """Get part number."""
        return self._part_number

    @property
    def cause(self) -> BaseException:
        """Get underlying error."""
        return self._cause

    def __reduce__(self):
        return type(self), (self._part_number, self._cause)


class InvalidResponseError(UploaderException):
    """Raised to indicate that non-xml response from server."""

    def __init__(
            self, code: int, content_type: Optional[str], body: Optional[str],
    ):
        self._code = code
        self._content_type = content_type
        self._body = body
        super().__init__(
            f"non-XML response from server; Response code: {code}, "
            f"Content-Type: {content_type}, Body: {body}"
        )

    def __reduce__(self):
        return type(self), (self._code, self._content_type, self._body)


class ServerError(UploaderException):
    """Raised to indicate that S3 service returning HTTP server error."""

    def __init__(self, message: str, status_code: int):
        self._status_code = status_code
        super().__init__(message)

    @property
    def status_code(self) -> int:
        """Get HTTP status code."""
        return self._status_code


A = TypeVar("A", bound="S3Error")


class S3Error(UploaderException):
    """
    Raised to indicate that error response is received
    when executing S3 operation.
    """

    def __init__(  # pylint: disable=too-many-positional-arguments
        self,
        response: BaseHTTPResponse,
        code: Optional[str],
        message: Optional[str],
        resource: Optional[str],
        request_id: Optional[str],
        host_id: Optional[str],
        bucket_name: Optional[str] = None,
        object_name: Optional[str] = None,
    ):
        self.response = response
        self.code = code
        self.message = message
        self.resource = resource
        self.request_id = request_id
        self.host_id = host_id
        self.bucket_name = bucket_name
        self.object_name = object_name

        bucket_message = f", bucket_name: {bucket_name}" if bucket_name else ""
        object_message = f", object_name: {object_name}" if object_name else ""

        super().__init__(
            f"S3 operation failed; code: {code}, message: {message}, "
            f"resource: {resource}, request_id: {request_id}, "
            f"host_id: {host_id}{bucket_message}{object_message}"
        )

    @classmethod
    def fromxml(cls: Type[A], response: BaseHTTPResponse) -> A:
        """Create new object with values from XML element."""
        element = ET.fromstring(response.data.decode())
        return cls(
            response=response,
            code=findtext(element, "Code"),
            message=findtext(element, "Message"),
            resource=findtext(element, "Resource"),
            request_id=findtext(element, "RequestId"),
            host_id=findtext(element, "HostId"),
            bucket_name=findtext(element, "BucketName"),
            object_name=findtext(element, "Key"),
        )

    def __repr__(self):
        return (
            f"S3Error(code={self.code!r}, message={self.message!r}, "
            f"resource={self.resource!r}, request_id={self.request_id!r}, "
            f"host_id={self.host_id!r}, bucket_name={self.bucket_name!r}, "
            f"object_name={self.object_name!r})"
        )
