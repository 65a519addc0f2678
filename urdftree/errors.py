"""
errors.py
------------

Exceptions raised by the parser and the asset layer, and the
warning records the assembler returns for everything it could
recover from.
"""


class MalformedDocument(ValueError):
    """
    The document is not well-formed XML or has no `robot` root.
    """


class PackageNotFound(KeyError):
    def __init__(self, package, reference):
        """
        A `package://` reference named a package with no mapping.

        Parameters
        ------------
        package : str
          Package name from the reference
        reference : str
          The full raw reference
        """
        super().__init__(package)
        self.package = package
        self.reference = reference

    def __str__(self):
        return f'no mapping for package `{self.package}` in `{self.reference}`'


class MeshLoadError(RuntimeError):
    def __init__(self, location, cause):
        """
        Fetching or decoding a mesh failed.

        Parameters
        ------------
        location : str
          Resolved location that was requested
        cause : BaseException
          The underlying error
        """
        super().__init__(location, cause)
        self.location = location
        self.cause = cause

    def __str__(self):
        return f'failed to load `{self.location}`: {self.cause!r}'


class AssemblyWarning(object):
    """
    Base class for recoverable problems found while assembling a tree.

    Subclasses set their fields in `__init__` and describe them
    in `message`.
    """
    # names of the fields compared for equality and shown in repr
    _fields = ()

    @property
    def kind(self):
        return type(self).__name__

    @property
    def message(self):
        raise NotImplementedError('call a subclass!')

    def __eq__(self, other):
        return (type(self) is type(other) and
                all(getattr(self, f) == getattr(other, f)
                    for f in self._fields))

    def __hash__(self):
        return hash((self.kind,) + tuple(
            str(getattr(self, f)) for f in self._fields))

    def __repr__(self):
        fields = ', '.join(f'{f}={getattr(self, f)!r}'
                           for f in self._fields)
        return f'{self.kind}({fields})'

    def __str__(self):
        return self.message


class DanglingJointReference(AssemblyWarning):
    _fields = ('joint', 'missing')

    def __init__(self, joint, missing):
        # joint name and the tuple of link names it could not find
        self.joint = joint
        self.missing = tuple(missing)

    @property
    def message(self):
        return 'joint `{}` references missing link(s): {}'.format(
            self.joint, ', '.join(self.missing))


class DuplicateParent(AssemblyWarning):
    _fields = ('child_link', 'joint', 'kept')

    def __init__(self, child_link, joint, kept):
        self.child_link = child_link
        self.joint = joint
        self.kept = kept

    @property
    def message(self):
        return (f'link `{self.child_link}` already has parent joint '
                f'`{self.kept}`, skipping joint `{self.joint}`')


class KinematicLoop(AssemblyWarning):
    _fields = ('joint', 'parent_link', 'child_link')

    def __init__(self, joint, parent_link, child_link):
        self.joint = joint
        self.parent_link = parent_link
        self.child_link = child_link

    @property
    def message(self):
        return (f'joint `{self.joint}` would close a loop: '
                f'`{self.child_link}` is an ancestor of `{self.parent_link}`')


class OrphanedLink(AssemblyWarning):
    _fields = ('link',)

    def __init__(self, link):
        self.link = link

    @property
    def message(self):
        return f'link `{self.link}` is not reachable from the robot root'


class UnresolvedPackage(AssemblyWarning):
    _fields = ('link', 'reference', 'package')

    def __init__(self, link, reference, package):
        self.link = link
        self.reference = reference
        self.package = package

    @property
    def message(self):
        return (f'link `{self.link}`: no mapping for package '
                f'`{self.package}` in `{self.reference}`')


class MeshLoadFailed(AssemblyWarning):
    _fields = ('link', 'location', 'cause')

    def __init__(self, link, location, cause):
        self.link = link
        self.location = location
        self.cause = cause

    @property
    def message(self):
        return (f'link `{self.link}`: failed to load '
                f'`{self.location}`: {self.cause!r}')
