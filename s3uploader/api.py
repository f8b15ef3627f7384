# -*- coding: utf-8 -*-
# S3 Uploader Library for Amazon S3 Compatible Cloud Storage, (C)
# 2015, 2016, 2017, 2025 MinIO, Inc.
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

# pylint: disable=too-many-arguments

"""
Simple Storage Service (aka S3) client performing the object creation
APIs used by uploads.
"""

from __future__ import absolute_import, annotations

import os
from datetime import timedelta
from typing import Optional, TextIO, cast
from urllib.parse import urlsplit, urlunsplit
from xml.etree import ElementTree as ET

import certifi
import urllib3
from urllib3 import Retry
from urllib3.util import Timeout

try:
    from urllib3.response import BaseHTTPResponse  # type: ignore[attr-defined]
except ImportError:
    from urllib3.response import HTTPResponse as BaseHTTPResponse

from .datatypes import Part, Payload
from .error import InvalidResponseError, S3Error, ServerError
from .helpers import (_DEFAULT_USER_AGENT, PARALLEL_UPLOADS,
                      headers_to_strings, md5sum_hash, quote, queryencode)
from .xml import Element, SubElement, findtext, getbytes, localname


def _etag(value: Optional[str]) -> str:
    """Strip quotes of ETag value."""
    return (value or "").replace('"', "")


class S3Client:
    """
    Simple Storage Service (aka S3) client sending unsigned requests to
    perform multipart and single object uploads.
    """
    _endpoint: str
    _secure: bool
    _headers: dict[str, str]
    _trace_stream: Optional[TextIO]
    _http: urllib3.PoolManager

    def __init__(
            self,
            endpoint: str,
            secure: bool = True,
            http_client: Optional[urllib3.PoolManager] = None,
            cert_check: bool = True,
            headers: Optional[dict[str, str]] = None,
            max_pool_connections: int = PARALLEL_UPLOADS,
    ):
        """
        Initializes a new S3Client object.

        Args:
            endpoint (str):
                Hostname of an S3 service with optional port.

            secure (bool, default=True):
                Flag to indicate whether to use a secure (TLS) connection
                to the S3 service.

            http_client (Optional[urllib3.PoolManager], default=None):
                Customized HTTP client.

            cert_check (bool, default=True):
                Flag to enable/disable server certificate validation
                for HTTPS connections.

            headers (Optional[dict[str, str]], default=None):
                Headers sent with every request.

            max_pool_connections (int, default=10):
                Number of connections kept per host by the default HTTP
                client. Set it to at least the `num_parallel_uploads` of
                the `Uploader` using this client; ignored when
                `http_client` is given.

        Notes:
            The `S3Client` object is thread-safe when used with the Python
            `threading` library.

        Example:
            >>> client = S3Client("localhost:9000", secure=False)
        """
        # Validate http client has correct base class.
        if http_client and not isinstance(http_client, urllib3.PoolManager):
            raise TypeError(
                "HTTP client should be urllib3.PoolManager like object, "
                f"got {type(http_client).__name__}",
            )

        if max_pool_connections < 1:
            raise ValueError("max_pool_connections must be at least 1")

        url = urlsplit(("https://" if secure else "http://") + endpoint)
        if not url.hostname or url.path or url.query or url.fragment:
            raise ValueError(f"invalid endpoint {endpoint}")
        if url.username or url.password:
            raise ValueError("credentials in endpoint are not allowed")
        try:
            url.port
        except ValueError as exc:
            raise ValueError("invalid port") from exc

        self._endpoint = url.netloc
        self._secure = secure
        self._headers = dict(headers or {})
        self._trace_stream = None

        # Load CA certificates from SSL_CERT_FILE file if set
        timeout = timedelta(minutes=5).seconds
        self._http = http_client or urllib3.PoolManager(
            timeout=Timeout(connect=timeout, read=timeout),
            maxsize=max_pool_connections,
            cert_reqs='CERT_REQUIRED' if cert_check else 'CERT_NONE',
            ca_certs=os.environ.get('SSL_CERT_FILE') or certifi.where(),
            retries=Retry(
                total=5,
                backoff_factor=0.2,
                status_forcelist=[500, 502, 503, 504]
            )
        )

    def __del__(self):
        if hasattr(self, "_http"):  # Only required for unit test run
            self._http.clear()

    def trace_on(self, stream: TextIO):
        """
        Enable http trace.

        Args:
            stream (TextIO):
                Stream for writing HTTP call tracing.
        """
        if not stream:
            raise ValueError('Input stream for trace output is invalid.')
        # Save new output stream.
        self._trace_stream = stream

    def trace_off(self):
        """Disable HTTP trace."""
        self._trace_stream = None

    def _build_url(
            self,
            bucket_name: str,
            object_name: str,
            query_params: Optional[dict[str, str]] = None,
    ) -> str:
        """Build path style URL."""
        query = "&".join(
            f"{queryencode(key)}={queryencode(value)}"
            for key, value in sorted((query_params or {}).items())
        )
        return urlunsplit((
            "https" if self._secure else "http",
            self._endpoint,
            f"/{quote(bucket_name)}/{quote(object_name)}",
            query,
            "",
        ))

    def _trace_request(
            self,
            method: str,
            url: str,
            headers: dict[str, str],
            body: Optional[bytes],
            no_body_trace: bool,
    ):
        """Write request to trace stream."""
        stream = cast(TextIO, self._trace_stream)
        split = urlsplit(url)
        query = ("?" + split.query) if split.query else ""
        stream.write("---------START-HTTP---------\n")
        stream.write(f"{method} {split.path}{query} HTTP/1.1\n")
        stream.write(headers_to_strings(headers))
        stream.write("\n")
        if not no_body_trace and body is not None:
            stream.write("\n")
            stream.write(body.decode())
            stream.write("\n")
        stream.write("\n")

    def _url_open(
            self,
            method: str,
            bucket_name: str,
            object_name: str,
            body: Optional[bytes] = None,
            headers: Optional[dict[str, str]] = None,
            query_params: Optional[dict[str, str]] = None,
            no_body_trace: bool = False,
    ) -> BaseHTTPResponse:
        """Execute HTTP request."""
        url = self._build_url(bucket_name, object_name, query_params)

        headers = {**self._headers, **(headers or {})}
        headers["Host"] = self._endpoint
        headers["User-Agent"] = _DEFAULT_USER_AGENT
        if method in ["PUT", "POST"]:
            headers["Content-Length"] = str(len(body or b""))
            if not headers.get("Content-Type"):
                headers["Content-Type"] = "application/octet-stream"

        if self._trace_stream:
            self._trace_request(method, url, headers, body, no_body_trace)

        response = self._http.urlopen(
            method,
            url,
            body=body,
            headers=headers,
            preload_content=True,
        )

        if self._trace_stream:
            self._trace_stream.write(f"HTTP/1.1 {response.status}\n")
            self._trace_stream.write(headers_to_strings(response.headers))
            self._trace_stream.write("\n")
            if response.data:
                self._trace_stream.write("\n")
                self._trace_stream.write(response.data.decode())
                self._trace_stream.write("\n")
            self._trace_stream.write("----------END-HTTP----------\n")

        if 200 <= response.status < 300:
            return response

        if not response.data:
            raise ServerError(
                f"server failed with HTTP status code {response.status}",
                response.status,
            )

        if "application/xml" not in response.headers.get(
                "content-type", "",
        ).split(";"):
            raise InvalidResponseError(
                response.status,
                cast(str, response.headers.get("content-type")),
                response.data.decode(),
            )

        raise S3Error.fromxml(response)

    def create_multipart_upload(
            self, bucket_name: str, object_name: str,
    ) -> str:
        """Execute CreateMultipartUpload S3 API."""
        response = self._url_open(
            method="POST",
            bucket_name=bucket_name,
            object_name=object_name,
            query_params={"uploads": ""},
        )
        element = ET.fromstring(response.data.decode())
        return cast(str, findtext(element, "UploadId", True))

    def upload_part(
            self,
            bucket_name: str,
            object_name: str,
            upload_id: str,
            part_number: int,
            payload: Payload,
    ) -> str:
        """Execute UploadPart S3 API."""
        response = self._url_open(
            method="PUT",
            bucket_name=bucket_name,
            object_name=object_name,
            body=payload.read(),
            query_params={
                "partNumber": str(part_number),
                "uploadId": upload_id,
            },
            no_body_trace=True,
        )
        return _etag(response.headers.get("etag"))

    def complete_multipart_upload(
            self,
            bucket_name: str,
            object_name: str,
            upload_id: str,
            parts: list[Part],
    ) -> str:
        """Execute CompleteMultipartUpload S3 API."""
        element = Element("CompleteMultipartUpload")
        for part in parts:
            tag = SubElement(element, "Part")
            SubElement(tag, "PartNumber", str(part.part_number))
            SubElement(tag, "ETag", '"' + part.etag + '"')
        body = getbytes(element)
        response = self._url_open(
            method="POST",
            bucket_name=bucket_name,
            object_name=object_name,
            body=body,
            headers={
                "Content-Type": "application/xml",
                "Content-MD5": md5sum_hash(body),
            },
            query_params={"uploadId": upload_id},
        )
        # CompleteMultipartUpload may fail after sending 200 OK.
        element = ET.fromstring(response.data.decode())
        if localname(element) == "Error":
            raise S3Error.fromxml(response)
        return _etag(findtext(element, "ETag"))

    def put_object(
            self, bucket_name: str, object_name: str, payload: Payload,
    ) -> str:
        """Execute PutObject S3 API."""
        response = self._url_open(
            method="PUT",
            bucket_name=bucket_name,
            object_name=object_name,
            body=payload.read(),
            no_body_trace=True,
        )
        return _etag(response.headers.get("etag"))
