"""First-time retrieval of a CodeBit by URL."""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath

from codebit_core import (
    CodeBitDescriptor,
    DescriptorError,
    FailureKind,
    FetchError,
    MetadataSyntaxError,
    extract_descriptor,
    parse_metadata,
    require_name,
)
from rich.console import Console
from rich.markup import escape

from codebit_sync.fetch import Fetcher, TempResource

logger = logging.getLogger(__name__)


class RetrieveState(Enum):
    RETRIEVED = "retrieved"
    REFUSED = "refused"  # destination already exists
    FAILED = "failed"


@dataclass
class RetrieveReport:
    """Outcome of retrieving a single URL."""

    url: str
    state: RetrieveState = RetrieveState.FAILED
    failure: FailureKind | None = None
    message: str = ""
    remote: CodeBitDescriptor | None = None
    destination: Path | None = None
    status_code: int | None = None

    @property
    def failed(self) -> bool:
        return self.state is RetrieveState.FAILED


def destination_name(name: str) -> str:
    """Reduce a CodeBit's ``name`` to a bare file name (no directories)."""
    candidate = PurePosixPath(name.strip().replace("\\", "/")).name
    if candidate in ("", ".", ".."):
        raise DescriptorError(FailureKind.MISSING_NAME, f"'{name}' is not a usable file name.")
    return candidate


class CodeBitRetriever:
    """Download CodeBits that do not exist locally yet."""

    def __init__(self, fetcher: Fetcher, *, directory: Path | None = None, console: Console | None = None):
        self.fetcher = fetcher
        self.directory = directory
        self.console = console or Console()

    def _say(self, text: str, style: str | None = None) -> None:
        self.console.print(f"   {escape(text)}", style=style)

    def _done(self, report: RetrieveReport, state: RetrieveState, message: str, style: str) -> RetrieveReport:
        report.state = state
        report.message = message
        self._say(message, style=style)
        return report

    def _fail(self, report: RetrieveReport, kind: FailureKind, message: str) -> RetrieveReport:
        logger.warning(f"{report.url}: {kind.value}: {message}")
        report.failure = kind
        return self._done(report, RetrieveState.FAILED, message, "red")

    def retrieve(self, url: str) -> RetrieveReport:
        """Fetch ``url`` and place it in the target directory under its metadata ``name``."""
        directory = Path(self.directory or Path.cwd())
        report = RetrieveReport(url=url)
        self.console.print()
        self.console.print(f"Retrieving CodeBit: {escape(url)}", style="bold")

        try:
            resource = self.fetcher.fetch(url, directory)
        except FetchError as e:
            report.status_code = e.status_code
            return self._fail(report, FailureKind.FETCH_ERROR, f"Web Error: {e}")

        with resource:
            return self._place(report, resource, directory)

    def _place(self, report: RetrieveReport, resource: TempResource, directory: Path) -> RetrieveReport:
        try:
            remote = extract_descriptor(parse_metadata(resource.read_text()))
            filename = destination_name(require_name(remote))
        except MetadataSyntaxError as e:
            return self._fail(report, FailureKind.SYNTAX_ERROR, f"YAML Syntax Error: {e}")
        except DescriptorError as e:
            return self._fail(report, e.kind, str(e))
        except OSError as e:
            return self._fail(report, FailureKind.IO_ERROR, f"Could not read download: {e}")
        report.remote = remote

        self._say(f"name: {remote.name}")
        if remote.description:
            self._say(f"description: {remote.description}")
        self._say(f"version: {remote.version}")

        dest = directory / filename
        report.destination = dest
        refusal = (
            f"'{dest}' already exists. Use 'codebit update \"{dest}\"' to update an existing CodeBit."
        )
        if dest.exists():
            return self._done(report, RetrieveState.REFUSED, refusal, "yellow")

        try:
            resource.commit(dest, overwrite=False)
        except FileExistsError:
            return self._done(report, RetrieveState.REFUSED, refusal, "yellow")
        except OSError as e:
            return self._fail(report, FailureKind.IO_ERROR, f"Could not write {dest}: {e}")

        logger.info(f"Retrieved {report.url} -> {dest}")
        return self._done(
            report, RetrieveState.RETRIEVED, f"'{filename}' version '{remote.version}' retrieved.", "green"
        )
