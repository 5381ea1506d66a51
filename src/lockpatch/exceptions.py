"""Exception hierarchy for lockpatch.

Every error raised here aborts the running ``add`` invocation. Cleanup
problems in the scratch workspace are logged as warnings instead.
"""


class LockpatchError(Exception):
    """Base exception for all lockpatch errors."""
    pass


class ConfigurationError(LockpatchError):
    """Error in configuration (invalid merge policy, etc.)."""
    pass


class PreconditionError(LockpatchError):
    """A requirement for running is not met (missing files, npm too old)."""
    pass


class InvalidSpecifierError(LockpatchError):
    """A package argument could not be parsed into a name."""
    pass


class ResolutionFailedError(LockpatchError):
    """The resolver exited with a non-zero code."""

    def __init__(self, message: str, returncode: int):
        super().__init__(message)
        self.returncode = returncode


class PackageNotFoundError(LockpatchError):
    """The requested package is absent from the resolved lockfile."""

    def __init__(self, package_name: str):
        super().__init__(f"Could not find {package_name} in the updated package-lock.json")
        self.package_name = package_name


class LockfileError(LockpatchError):
    """Base error for lockfile-related issues."""
    pass


class LockfileParseError(LockfileError):
    """Cannot parse lockfile."""
    pass


class LockfileIOError(LockfileError):
    """Reading, copying or writing a lockfile failed."""
    pass
