# -*- coding: utf-8 -*-
# S3 Uploader Library for Amazon S3 Compatible Cloud Storage,
# (C) 2015, 2016, 2025 MinIO, Inc.
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

import io
import unittest.mock as mock
from unittest import TestCase

import urllib3

from s3uploader import S3Client
from s3uploader.datatypes import BytesPayload, Part
from s3uploader.error import InvalidResponseError, S3Error, ServerError

from .s3_mocks import MockConnection, MockResponse


def generate_error(code, message, request_id, host_id,
                   resource, bucket_name, object_name):
    return f'''
    <Error>
      <Code>{code}</Code>
      <Message>{message}</Message>
      <RequestId>{request_id}</RequestId>
      <HostId>{host_id}</HostId>
      <Resource>{resource}</Resource>
      <BucketName>{bucket_name}</BucketName>
      <Key>{object_name}</Key>
    </Error>
    '''


_XML = {"Content-Type": "application/xml"}


class S3ClientInitTest(TestCase):
    def test_invalid_endpoint(self):
        self.assertRaises(ValueError, S3Client, "localhost:9000/path")
        self.assertRaises(ValueError, S3Client, "localhost:9000?query")
        self.assertRaises(ValueError, S3Client, "user:pass@localhost")
        self.assertRaises(ValueError, S3Client, "localhost:port")

    def test_invalid_http_client(self):
        self.assertRaises(
            TypeError, S3Client, "localhost:9000", http_client=object(),
        )

    def test_custom_http_client(self):
        http = urllib3.PoolManager()
        client = S3Client("localhost:9000", http_client=http)
        self.assertIs(client._http, http)

    @mock.patch('urllib3.PoolManager')
    def test_max_pool_connections(self, mock_pool):
        S3Client("localhost:9000", secure=False)
        self.assertEqual(mock_pool.call_args.kwargs["maxsize"], 10)
        S3Client("localhost:9000", secure=False, max_pool_connections=20)
        self.assertEqual(mock_pool.call_args.kwargs["maxsize"], 20)
        self.assertRaises(
            ValueError, S3Client, "localhost:9000", max_pool_connections=0,
        )


class S3ClientTest(TestCase):
    def setUp(self):
        patcher = mock.patch('urllib3.PoolManager')
        self.addCleanup(patcher.stop)
        mock_connection = patcher.start()
        self.server = MockConnection()
        mock_connection.return_value = self.server
        self.client = S3Client("localhost:9000", secure=False)

    def test_create_multipart_upload(self):
        self.server.mock_add_request(
            MockResponse(
                'POST', 'http://localhost:9000/bucket/object?uploads=',
                {}, 200, response_headers=_XML,
                content=(
                    '<InitiateMultipartUploadResult '
                    'xmlns="http://s3.amazonaws.com/doc/2006-03-01/">'
                    '<Bucket>bucket</Bucket><Key>object</Key>'
                    '<UploadId>upload-id</UploadId>'
                    '</InitiateMultipartUploadResult>'
                ),
            ),
        )
        upload_id = self.client.create_multipart_upload("bucket", "object")
        self.assertEqual(upload_id, "upload-id")

    def test_upload_part(self):
        self.server.mock_add_request(
            MockResponse(
                'PUT',
                'http://localhost:9000/bucket/object'
                '?partNumber=3&uploadId=upload-id',
                {'Content-Length': '5'}, 200,
                response_headers={'ETag': '"part-etag"'},
            ),
        )
        etag = self.client.upload_part(
            "bucket", "object", "upload-id", 3, BytesPayload(b"hello"),
        )
        self.assertEqual(etag, "part-etag")
        self.assertEqual(self.server.served[0].body, b"hello")

    def test_complete_multipart_upload(self):
        self.server.mock_add_request(
            MockResponse(
                'POST', 'http://localhost:9000/bucket/object?uploadId=up',
                {'Content-Type': 'application/xml'}, 200,
                response_headers=_XML,
                content=(
                    '<CompleteMultipartUploadResult>'
                    '<Bucket>bucket</Bucket><Key>object</Key>'
                    '<ETag>"object-etag-2"</ETag>'
                    '</CompleteMultipartUploadResult>'
                ),
            ),
        )
        etag = self.client.complete_multipart_upload(
            "bucket", "object", "up", [Part(1, "a"), Part(2, "b")],
        )
        self.assertEqual(etag, "object-etag-2")
        body = self.server.served[0].body.decode()
        self.assertIn(
            "<Part><PartNumber>1</PartNumber><ETag>\"a\"</ETag></Part>"
            "<Part><PartNumber>2</PartNumber><ETag>\"b\"</ETag></Part>",
            body,
        )

    def test_complete_multipart_upload_error_in_ok_response(self):
        self.server.mock_add_request(
            MockResponse(
                'POST', 'http://localhost:9000/bucket/object?uploadId=up',
                {}, 200, response_headers=_XML,
                content=generate_error(
                    'InternalError', 'We encountered an internal error',
                    'request-id', 'host-id', '/bucket/object',
                    'bucket', 'object',
                ),
            ),
        )
        with self.assertRaises(S3Error) as context:
            self.client.complete_multipart_upload(
                "bucket", "object", "up", [Part(1, "a")],
            )
        self.assertEqual(context.exception.code, "InternalError")

    def test_put_object(self):
        self.server.mock_add_request(
            MockResponse(
                'PUT', 'http://localhost:9000/bucket/my%20object',
                {'Content-Length': '5'}, 200,
                response_headers={'ETag': '"object-etag"'},
            ),
        )
        etag = self.client.put_object(
            "bucket", "my object", BytesPayload(b"hello"),
        )
        self.assertEqual(etag, "object-etag")

    def test_put_object_created(self):
        self.server.mock_add_request(
            MockResponse(
                'PUT', 'http://localhost:9000/bucket/object',
                {'Content-Length': '5'}, 201,
                response_headers={'ETag': '"abc"'},
            ),
        )
        etag = self.client.put_object(
            "bucket", "object", BytesPayload(b"hello"),
        )
        self.assertEqual(etag, "abc")

    def test_s3_error(self):
        self.server.mock_add_request(
            MockResponse(
                'PUT', 'http://localhost:9000/bucket/object',
                {}, 404, response_headers=_XML,
                content=generate_error(
                    'NoSuchBucket', 'The specified bucket does not exist',
                    'request-id', 'host-id', '/bucket', 'bucket', 'object',
                ),
            ),
        )
        with self.assertRaises(S3Error) as context:
            self.client.put_object("bucket", "object", BytesPayload(b""))
        self.assertEqual(context.exception.code, "NoSuchBucket")
        self.assertEqual(context.exception.bucket_name, "bucket")
        self.assertEqual(context.exception.request_id, "request-id")

    def test_server_error(self):
        self.server.mock_add_request(
            MockResponse('PUT', 'http://localhost:9000/bucket/object',
                         {}, 503),
        )
        with self.assertRaises(ServerError) as context:
            self.client.put_object("bucket", "object", BytesPayload(b""))
        self.assertEqual(context.exception.status_code, 503)

    def test_invalid_response(self):
        self.server.mock_add_request(
            MockResponse('PUT', 'http://localhost:9000/bucket/object',
                         {}, 403, response_headers={
                             'Content-Type': 'text/html'},
                         content='<html>denied</html>'),
        )
        self.assertRaises(
            InvalidResponseError,
            self.client.put_object, "bucket", "object", BytesPayload(b""),
        )

    def test_trace(self):
        stream = io.StringIO()
        self.client.trace_on(stream)
        self.server.mock_add_request(
            MockResponse(
                'PUT', 'http://localhost:9000/bucket/object',
                {}, 200, response_headers={'ETag': '"e"'},
            ),
        )
        self.client.put_object("bucket", "object", BytesPayload(b"secret"))
        trace = stream.getvalue()
        self.assertIn("PUT /bucket/object HTTP/1.1", trace)
        self.assertIn("HTTP/1.1 200", trace)
        self.assertNotIn("secret", trace)

        self.client.trace_off()
        self.server.mock_add_request(
            MockResponse(
                'PUT', 'http://localhost:9000/bucket/object',
                {}, 200, response_headers={'ETag': '"e"'},
            ),
        )
        self.client.put_object("bucket", "object", BytesPayload(b""))
        self.assertEqual(stream.getvalue(), trace)
