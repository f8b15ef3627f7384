# -*- coding: utf-8 -*-
# S3 Uploader Library for Amazon S3 Compatible Cloud Storage,
# (C) 2017, 2025 MinIO, Inc.
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
s3uploader - Object upload for Amazon S3 Compatible Cloud Storage

    >>> from s3uploader import FileSource, S3Client, Uploader
    >>> uploader = Uploader(S3Client("localhost:9000", secure=False))
    >>> etag = uploader.put_object(
    ...     "my-bucket", "my-object", FileSource("my-filename"),
    ... )
    >>> print(etag)

:copyright: (C) 2017, 2025 MinIO, Inc.
:license: Apache 2.0, see LICENSE for more details.
"""

__title__ = "s3uploader"
__author__ = "MinIO, Inc."
__version__ = "1.0.0"
__license__ = "Apache 2.0"
__copyright__ = "Copyright 2017, 2025 MinIO, Inc."

# pylint: disable=unused-import,useless-import-alias
from .api import S3Client as S3Client
from .datatypes import FileSource as FileSource
from .datatypes import StreamSource as StreamSource
from .error import PartUploadError as PartUploadError
from .error import S3Error as S3Error
from .error import SizeExceededError as SizeExceededError
from .uploader import Uploader as Uploader
