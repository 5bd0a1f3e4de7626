"""Path and name normalization used when rendering feature reports."""

import re

FEATURE_SUFFIX = ".feature"

_ID_UNSAFE = re.compile(r"[\s_]")
_REPEATED_DOTS = re.compile(r"\.\.+")


def remove_prefix(path: str | None) -> str | None:
    """Strip a resource prefix such as ``classpath:`` or ``file:``.

    Everything up to and including the first colon is removed; paths without
    a colon are returned unchanged.
    """
    if path is None:
        return None
    _, sep, rest = path.partition(":")
    return rest if sep else path


def to_id_string(name: str | None) -> str:
    """Turn a feature or scenario name into an id-safe slug."""
    if name is None:
        return ""
    return _ID_UNSAFE.sub("-", name).lower()


def to_package_qualified_name(path: str) -> str:
    """Convert a feature path into a dotted, package-style name.

    ``classpath:com/example/users.feature`` becomes ``com.example.users``.
    """
    name = remove_prefix(path) or ""
    if name.endswith(FEATURE_SUFFIX):
        name = name[: -len(FEATURE_SUFFIX)]
    name = name.lstrip("/")
    return _REPEATED_DOTS.sub(".", name.replace("/", "."))


def nanos_to_millis(nanos: int) -> float:
    """Convert a nanosecond duration to fractional milliseconds."""
    return nanos / 1_000_000
