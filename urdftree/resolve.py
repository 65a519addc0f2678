"""
resolve.py
-------------

Turn the raw mesh filename written in a URDF into a concrete
location which can be fetched, and fetch it.
"""
import os
import re

from urllib.parse import urlsplit

from trimesh import resolvers

from .errors import PackageNotFound

# references with these prefixes are already concrete
_ABSOLUTE = ('http://', 'https://', 'file://', '/')
_PACKAGE = 'package://'
_PARENT = '../'
_SCHEME = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*://')


def resolve_path(raw_reference, base_path='', packages=None):
    """
    Resolve a mesh reference into a concrete location.

    Rules are applied in this order:
      1. `package://<pkg>/<rest>` is `packages[pkg]` joined with `rest`
      2. URLs and absolute paths are returned unchanged
      3. one leading `../` resolves against the parent of `base_path`
      4. anything else resolves against `base_path`

    Only a single leading `../` is handled, deeper traversal is
    passed through as written.

    Parameters
    ------------
    raw_reference : str
      Filename exactly as written in the document
    base_path : str
      Directory or URL the document was loaded from
    packages : None or dict
      Package name to base directory or URL

    Returns
    ------------
    location : str
      Concrete location with repeated separators collapsed

    Raises
    ------------
    PackageNotFound
      If a `package://` reference names an unmapped package
    """
    if raw_reference.startswith(_PACKAGE):
        package, _, rest = raw_reference[len(_PACKAGE):].partition('/')
        if packages is None or package not in packages:
            raise PackageNotFound(package=package, reference=raw_reference)
        return join(packages[package], rest)

    if raw_reference.startswith(_ABSOLUTE):
        return raw_reference

    base_path = base_path or ''
    if raw_reference.startswith(_PARENT):
        return join(parent(base_path), raw_reference[len(_PARENT):])

    return join(base_path, raw_reference)


def parent(path):
    """
    Get the parent of a directory path or URL.

    Parameters
    ------------
    path : str
      Directory, with or without a trailing separator

    Returns
    ------------
    parent : str
      Everything before the last path component
    """
    scheme, rest = split_scheme(path)
    rest = rest.rstrip('/')
    if '/' not in rest:
        # keep a bare root like `/` or `http://host`
        if path.startswith('/') or scheme:
            return scheme + rest if scheme else '/'
        return ''
    head = rest.rsplit('/', 1)[0]
    if not head and not scheme:
        return '/'
    return scheme + head


def join(base, rest):
    """
    Join a base location and a relative path, collapsing
    repeated separators but not the `//` of a URL scheme.
    """
    if not base:
        return normalize(rest)
    return normalize(f'{base}/{rest}')


def normalize(location):
    scheme, rest = split_scheme(location)
    return scheme + re.sub('/+', '/', rest)


def split_scheme(location):
    """
    Split a location into `(scheme, remainder)` where scheme
    is like `https://` or an empty string.
    """
    match = _SCHEME.match(location)
    if match is None:
        return '', location
    return match.group(0), location[match.end():]


def fetch_location(location):
    """
    Fetch the bytes at a resolved location from the local
    file system or over HTTP.

    Parameters
    ------------
    location : str
      Path or URL

    Returns
    ------------
    data : bytes
      Raw file contents
    """
    scheme, rest = split_scheme(location)
    if scheme in ('http://', 'https://'):
        # the resolver requests relative to the URL's directory
        parsed = urlsplit(location)
        name = parsed.path.rsplit('/', 1)[-1]
        if parsed.query:
            name = f'{name}?{parsed.query}'
        resolver = resolvers.WebResolver(url=location)
        return resolver.get(name)
    if scheme == 'file://':
        location = rest
    resolver = resolvers.FilePathResolver(location)
    return resolver.get(os.path.basename(location))
