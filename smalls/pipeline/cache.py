import errno
import os
import tempfile
from pathlib import Path

from smalls.errors import CacheIOError

NO_HARD_LINKS = {errno.EPERM, errno.ENOTSUP, errno.EOPNOTSUPP, errno.EXDEV}


def _create_exclusive(path, data):
    try:
        f = open(path, "xb")
    except FileExistsError:
        return False
    try:
        with f:
            f.write(data)
    except BaseException:
        os.unlink(path)
        raise
    return True


def write_if_absent(path, data):
    """
    Atomically create path with data unless it already exists.
    The bytes land in a temp file next to path and are hard-linked into place,
    so readers never see a partial file and an existing file is never replaced.
    Filesystems without hard links fall back to an exclusive create.
    Returns True if written, False if the file was already there.
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        try:
            os.link(tmp_name, path)
        except FileExistsError:
            return False
        except OSError as e:
            if e.errno not in NO_HARD_LINKS:
                raise
            return _create_exclusive(path, data)
        return True
    finally:
        os.unlink(tmp_name)


def replace_atomic(path, data):
    """Atomically write data to path, replacing any previous file."""
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


class HtmlCache:
    """Raw page cache: one <stem>.html file per page under root."""

    def __init__(self, root):
        self.root = Path(root)

    def ensure_root(self):
        """Create the cache directory. Failure here is fatal to the run."""
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheIOError(self.root, str(e)) from e

    def path_for(self, stem):
        return self.root / f"{stem}.html"

    def exists(self, path):
        return Path(path).exists()

    def read(self, path):
        try:
            return Path(path).read_bytes()
        except OSError as e:
            raise CacheIOError(path, str(e)) from e

    def write(self, path, data):
        try:
            return write_if_absent(path, data)
        except OSError as e:
            raise CacheIOError(path, str(e)) from e

    def discard(self, stem):
        """Drop a cached page so the next fetch_through downloads it again."""
        path = self.path_for(stem)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise CacheIOError(path, str(e)) from e
        return True

    def fetch_through(self, stem, url, fetcher):
        """
        Return (bytes, hit) for the page cached under stem.
        On a miss the page is downloaded with fetcher(url) and stored first.
        Presence of the file is the only cache-hit signal.
        """
        path = self.path_for(stem)
        if self.exists(path):
            return self.read(path), True

        data = fetcher(url)
        if not self.write(path, data):
            # Another run stored it between our check and our write; its copy wins.
            return self.read(path), False
        return data, False
