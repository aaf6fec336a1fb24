from importlib import metadata as _metadata


def _load_version() -> str:
    """Return the package version from the installed metadata."""
    try:
        return _metadata.version("varscope")
    except _metadata.PackageNotFoundError:
        return "0.0.0"


__version__ = _load_version()
