# -*- coding: utf-8 -*-
# S3 Uploader Library for Amazon S3 Compatible Cloud Storage, (C)
# 2025 MinIO, Inc.
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
import logging
import sys
from urllib.request import urlopen

from s3uploader import FileSource, S3Client, StreamSource, Uploader

logging.basicConfig(level=logging.DEBUG)

client = S3Client("localhost:9000", secure=False)
client.trace_on(sys.stderr)
uploader = Uploader(client)

# Upload a file.
etag = uploader.put_object("my-bucket", "my-object", FileSource("my-filename"))
print(f"created my-object object; etag: {etag}")

# Upload first 1MiB of a file.
etag = uploader.put_object(
    "my-bucket", "my-object", FileSource("my-filename", length=1024*1024),
)
print(f"created my-object object; etag: {etag}")

# Upload data of known size.
etag = uploader.put_object(
    "my-bucket", "my-object", StreamSource(io.BytesIO(b"hello"), length=5),
)
print(f"created my-object object; etag: {etag}")

# Upload unknown-sized data.
with urlopen(
    "https://cdn.kernel.org/pub/linux/kernel/v5.x/linux-5.4.81.tar.xz",
) as data:
    etag = uploader.put_object("my-bucket", "my-object", StreamSource(data))
print(f"created my-object object; etag: {etag}")
