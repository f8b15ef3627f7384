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

"""Helper functions."""

from __future__ import absolute_import, annotations, division, unicode_literals

import base64
import hashlib
import platform
import urllib.parse
from dataclasses import dataclass
from queue import Queue
from threading import BoundedSemaphore, Thread
from typing import Any, BinaryIO, Mapping, Optional

from . import __title__, __version__

_DEFAULT_USER_AGENT = (
    f"S3Uploader ({platform.system()}; {platform.machine()}) "
    f"{__title__}/{__version__}"
)

MAX_MULTIPART_COUNT = 10000  # 10000 parts
MAX_OBJECT_SIZE = 5 * 1024 * 1024 * 1024 * 1024  # 5TiB
MAX_PART_SIZE = 5 * 1024 * 1024 * 1024  # 5GiB
MIN_PART_SIZE = 64 * 1024 * 1024  # 64MiB
SINGLE_PUT_THRESHOLD = 64 * 1024 * 1024  # 64MiB
PARALLEL_UPLOADS = 10


def quote(
        resource: str,
        safe: str = "/",
        encoding: str | None = None,
        errors: str | None = None,
) -> str:
    """
    Wrapper to urllib.parse.quote() replacing back to '~' for older python
    versions.
    """
    return urllib.parse.quote(
        resource,
        safe=safe,
        encoding=encoding,
        errors=errors,
    ).replace("%7E", "~")


def queryencode(query: str) -> str:
    """Encode query parameter value."""
    return quote(query, safe="")


def headers_to_strings(headers: Mapping[str, str]) -> str:
    """Convert HTTP headers to multi-line string."""
    return "\n".join(f"{key}: {value}" for key, value in headers.items())


def check_non_empty_string(string: str, name: str):
    """Check whether given string is not empty."""
    try:
        if not string.strip():
            raise ValueError(f"{name} must not be empty")
    except AttributeError as exc:
        raise TypeError(f"{name} must be str type") from exc


def md5sum_hash(data: bytes) -> str:
    """Compute MD5 of data and return hash as Base64 encoded value."""
    # indicate md5 hashing algorithm is not used in a security context.
    hasher = hashlib.new(  # type: ignore[call-arg]
        "md5",
        usedforsecurity=False,
    )
    hasher.update(data)
    return base64.b64encode(hasher.digest()).decode()


@dataclass(frozen=True)
class PartInfo:
    """Planned byte range of one part of a multipart upload."""
    part_number: int
    offset: int
    length: int


def select_part_sizes(
        object_size: int,
        min_part_size: int = MIN_PART_SIZE,
        max_part_count: int = MAX_MULTIPART_COUNT,
) -> list[PartInfo]:
    """
    Plan parts for object size.

    Every part except the last one has the same size which is the larger
    of ``min_part_size`` and the size needed to fit the object into
    ``max_part_count`` parts. The last part carries the remainder if any.
    Zero object size gives no parts.
    """
    if object_size < 0:
        raise ValueError(f"object size {object_size} must not be negative")
    if min_part_size <= 0 or max_part_count <= 0:
        raise ValueError("part size and part count must be positive")

    part_size = max(
        min_part_size,
        (object_size + max_part_count - 1) // max_part_count,
    )
    part_count, last_part_size = divmod(object_size, part_size)
    parts = [
        PartInfo(part_number=index + 1, offset=index * part_size,
                 length=part_size)
        for index in range(part_count)
    ]
    if last_part_size:
        parts.append(
            PartInfo(part_number=part_count + 1,
                     offset=part_count * part_size,
                     length=last_part_size),
        )
    return parts


def read_part_data(
        stream: BinaryIO,
        size: int,
        part_data: bytes = b"",
) -> bytes:
    """Read part data of given size from stream."""
    size -= len(part_data)
    while size > 0:
        data = stream.read(size)
        if not data:
            break  # EOF reached
        if not isinstance(data, bytes):
            raise ValueError("read() must return 'bytes' object")
        part_data += data
        size -= len(data)
    return part_data


class Worker(Thread):
    """ Thread executing tasks from a given tasks queue """

    def __init__(self, tasks_queue: Queue, results_queue: Queue):
        Thread.__init__(self, daemon=True)
        self._tasks_queue = tasks_queue
        self._results_queue = results_queue
        self.start()

    def run(self):
        """ Continuously receive tasks and execute them """
        while True:
            task = self._tasks_queue.get()
            if not task:
                self._tasks_queue.task_done()
                break
            index, func, args, kargs, cleanup_func = task
            try:
                self._results_queue.put((index, func(*args, **kargs), None))
            except Exception as exc:  # pylint: disable=broad-except
                self._results_queue.put((index, None, exc))
            finally:
                cleanup_func()
            # Mark this task as done, whether an exception happened or not
            self._tasks_queue.task_done()


class ThreadPool:
    """
    Pool of threads consuming tasks from a queue. Every task gets exactly
    one result entry; an exception raised by a task is captured as its
    result instead of stopping the pool.
    """
    _results_queue: Queue
    _tasks_queue: Queue
    _sem: BoundedSemaphore
    _num_threads: int
    _num_tasks: int

    def __init__(self, num_threads: int):
        if num_threads < 1:
            raise ValueError("number of threads must be at least 1")
        self._results_queue = Queue()
        self._tasks_queue = Queue()
        self._sem = BoundedSemaphore(num_threads)
        self._num_threads = num_threads
        self._num_tasks = 0

    def add_task(self, func, *args, **kargs):
        """
        Add a task to the queue. Calling this function can block
        until workers have a room for processing new tasks. Blocking
        the caller also prevents the latter from allocating a lot of
        memory while workers are still busy running their assigned tasks.
        """
        self._sem.acquire()  # pylint: disable=consider-using-with
        self._tasks_queue.put(
            (self._num_tasks, func, args, kargs, self._sem.release),
        )
        self._num_tasks += 1

    def start_parallel(self):
        """ Prepare threads to run tasks"""
        for _ in range(self._num_threads):
            Worker(self._tasks_queue, self._results_queue)

    def result(self) -> list[tuple[Any, Optional[Exception]]]:
        """
        Stop threads and return ``(value, exception)`` of all called tasks
        in the order they were added.
        """
        # Send None to all threads to cleanly stop them
        for _ in range(self._num_threads):
            self._tasks_queue.put(None)
        # Wait for completion of all the tasks in the queue
        self._tasks_queue.join()
        results: list[tuple[Any, Optional[Exception]]] = (
            [(None, None)] * self._num_tasks
        )
        while not self._results_queue.empty():
            index, value, exc = self._results_queue.get()
            results[index] = (value, exc)
        return results
