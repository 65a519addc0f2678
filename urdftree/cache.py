"""
cache.py
-----------

Load each distinct mesh location once, and hand every consumer
an independent copy.

Loads run on a thread pool owned by the cache. The first request
for a location schedules the fetch and decode, every later or
concurrent request for that location gets the same future. A
`MeshCache` belongs to one loaded document and is closed with it.
"""
import logging
import threading

from concurrent.futures import CancelledError, ThreadPoolExecutor

import trimesh

from .errors import MeshLoadError
from .resolve import fetch_location

log = logging.getLogger(__name__)


class MeshCache(object):
    def __init__(self, fetch=None, max_workers=None):
        """
        Create an empty cache.

        Parameters
        ------------
        fetch : None or callable
          Takes a resolved location and returns bytes, the
          default reads local files and URLs
        max_workers : None or int
          Size of the loading thread pool
        """
        if fetch is None:
            fetch = fetch_location
        self.fetch = fetch

        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix='urdftree-mesh')
        # resolved location to Future of a decoded template
        self._entries = {}
        # serializes creation of entries
        self._lock = threading.Lock()
        self._closed = False

    def __contains__(self, location):
        with self._lock:
            return location in self._entries

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def request(self, location):
        """
        Get the shared future for a location, scheduling the
        load if this is the first request for it.

        Parameters
        ------------
        location : str
          Resolved mesh location

        Returns
        ------------
        future : concurrent.futures.Future
          Resolves to the decoded template, which must not
          be mutated: use `instance` to get a copy.
        """
        with self._lock:
            if self._closed:
                raise RuntimeError('mesh cache is closed')
            future = self._entries.get(location)
            if future is not None:
                return future
            log.debug('loading `%s`', location)
            future = self._executor.submit(self._load, location)
            self._entries[location] = future
        future.add_done_callback(
            lambda f, key=location: self._evict_cancelled(key, f))
        return future

    def load_mesh(self, location):
        """
        Get an independent copy of the mesh at a location,
        blocking until it is loaded.

        Parameters
        ------------
        location : str
          Resolved mesh location

        Returns
        ------------
        mesh : trimesh.Trimesh or trimesh.Scene
          Copy owned by the caller

        Raises
        ------------
        MeshLoadError
          If the location could not be fetched or decoded
        """
        return self.instance(self.request(location), location=location)

    def instance(self, future, location=None):
        """
        Copy the template held by a finished `request` future.

        Parameters
        ------------
        future : concurrent.futures.Future
          Returned by `request`
        location : None or str
          Location the future was requested for

        Returns
        ------------
        mesh : trimesh.Trimesh or trimesh.Scene
          Copy owned by the caller

        Raises
        ------------
        MeshLoadError
          If the load failed or was cancelled
        """
        try:
            template = future.result()
        except CancelledError as E:
            raise MeshLoadError(location=location, cause=E) from E
        return template.copy()

    def close(self):
        """
        Cancel loads which have not started and release the
        thread pool. Loads already running finish in place.
        """
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _evict_cancelled(self, location, future):
        # evict cancelled entries so no key stays in progress
        if not future.cancelled():
            return
        with self._lock:
            if self._entries.get(location) is future:
                del self._entries[location]

    def _load(self, location):
        try:
            data = self.fetch(location)
            loaded = trimesh.load(
                file_obj=trimesh.util.wrap_as_stream(data),
                file_type=file_type(location))
        except Exception as E:
            log.debug('failed to load `%s`', location, exc_info=True)
            raise MeshLoadError(location=location, cause=E) from E

        if not isinstance(loaded, (trimesh.Trimesh, trimesh.Scene)):
            raise MeshLoadError(
                location=location,
                cause=TypeError(f'not a known geometry type: {type(loaded)}'))
        return loaded


def file_type(location):
    """
    Get the lower case file extension of a location, ignoring
    any URL query string.
    """
    name = location.split('?', 1)[0].rsplit('/', 1)[-1]
    if '.' not in name:
        return None
    return name.rsplit('.', 1)[-1].lower()
