"""Download master copies into caller-owned temporary files."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

import httpx
from codebit_core import FetchConfig, FetchError

logger = logging.getLogger(__name__)

# Master copies are mutable; always ask for the current bytes.
NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}

TEMP_SUFFIX = ".tmp"
TEMP_PREFIX = ".codebit-"


class TempResource:
    """
    A downloaded file owned by exactly one transaction.

    Use as a context manager. Unless ``commit`` moved the file onto its final
    path, leaving the ``with`` block deletes it, whatever the exit path.
    """

    def __init__(self, path: Path):
        self.path = path
        self.committed = False

    def __enter__(self) -> TempResource:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.discard()

    def commit(self, dest: Path, *, overwrite: bool = True) -> Path:
        """
        Move the temp file onto ``dest``.

        With ``overwrite`` the existing file is replaced atomically. Without it
        an existing ``dest`` raises FileExistsError and nothing is touched.
        """
        if overwrite:
            os.replace(self.path, dest)
        else:
            try:
                os.link(self.path, dest)
            except FileExistsError:
                raise
            except OSError:
                # No hard links on this filesystem
                if dest.exists():
                    raise FileExistsError(f"{dest} already exists")
                os.replace(self.path, dest)
            else:
                self.path.unlink()
        self.committed = True
        logger.debug(f"Committed {self.path} -> {dest}")
        return dest

    def discard(self) -> None:
        if self.committed:
            return
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove temporary file {self.path}: {e}")
        self.committed = True

    def read_text(self) -> str:
        return self.path.read_text(encoding="utf-8-sig", errors="replace")


class Fetcher:
    """HTTP(S) fetcher with caching disabled; one client per fetcher."""

    def __init__(self, config: FetchConfig | None = None, transport: httpx.BaseTransport | None = None):
        self.config = config or FetchConfig()
        self._client = httpx.Client(
            timeout=self.config.timeout,
            follow_redirects=self.config.follow_redirects,
            headers={"User-Agent": self.config.user_agent, **NO_CACHE_HEADERS},
            transport=transport,
        )

    def __enter__(self) -> Fetcher:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch(self, url: str, working_dir: Path) -> TempResource:
        """
        Download ``url`` into a new temporary file inside ``working_dir``.

        The file lives next to its eventual destination so the final move is a
        same-volume rename.

        Raises:
            FetchError: on network failure, a non-2xx status, or a local write
                error. No temporary file is left behind in that case.
        """
        logger.info(f"Fetching {url}")
        try:
            fd, name = tempfile.mkstemp(suffix=TEMP_SUFFIX, prefix=TEMP_PREFIX, dir=working_dir)
        except OSError as e:
            raise FetchError(f"could not create a temporary file in {working_dir}: {e}") from e
        tmp_path = Path(name)
        try:
            with os.fdopen(fd, "wb") as out:
                with self._client.stream("GET", url) as response:
                    if not response.is_success:
                        raise FetchError(response.reason_phrase or "HTTP error", response.status_code)
                    for chunk in response.iter_bytes():
                        out.write(chunk)
        except FetchError:
            tmp_path.unlink(missing_ok=True)
            raise
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            tmp_path.unlink(missing_ok=True)
            raise FetchError(str(e) or e.__class__.__name__) from e
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise FetchError(f"could not write {tmp_path}: {e}") from e

        logger.debug(f"Downloaded {url} -> {tmp_path}")
        return TempResource(tmp_path)
