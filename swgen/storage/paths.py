"""Path resolution against the trusted document root.

Contract:
- Inputs: Paths as given by the caller, the document root
- Outputs: Resolved absolute Paths and root-relative urls
- Side Effects: None (reads directory listings only)
"""

from collections.abc import Iterator
from pathlib import Path

from swgen.errors import PathOutsideRootError


def resolve_in_root(path: str | Path, root: Path) -> Path:
    """Resolve path and make sure it stays inside root.

    Relative paths are taken relative to root. Symlinks are followed before
    the containment check.

    Args:
        path: File or directory path
        root: Trusted document root (already resolved)

    Returns:
        Absolute resolved path

    Raises:
        PathOutsideRootError: If the resolved path is not under root

    Example:
        >>> resolve_in_root("css/site.css", Path("/srv/www"))
        PosixPath('/srv/www/css/site.css')
    """
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = root / candidate
    resolved = candidate.resolve()

    if resolved != root and not resolved.is_relative_to(root):
        raise PathOutsideRootError(str(path), str(root))
    return resolved


def to_url(path: Path, root: Path) -> str:
    """Convert a resolved path under root into a root-relative url.

    Example:
        >>> to_url(Path("/srv/www/img/logo.svg"), Path("/srv/www"))
        '/img/logo.svg'
    """
    relative = path.relative_to(root).as_posix()
    if relative == ".":
        return "/"
    return "/" + relative


def iter_regular_files(directory: Path) -> Iterator[Path]:
    """Yield every regular file under directory, recursively, in sorted order.

    Args:
        directory: Directory to walk

    Raises:
        NotADirectoryError: If directory is not a directory
    """
    if not directory.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")

    for child in sorted(directory.iterdir(), key=lambda p: p.name):
        if child.is_dir():
            yield from iter_regular_files(child)
        elif child.is_file():
            yield child
