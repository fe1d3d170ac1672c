"""Update local CodeBits from their master copies.

Each local file is one transaction::

    START -> LOCAL_LOADED -> LOCAL_VALIDATED -> REMOTE_FETCHED
          -> REMOTE_VALIDATED -> COMPARED -> UP_TO_DATE
                                           | ANOMALY_LOCAL_NEWER
                                           | PENDING_CONFIRMATION -> APPLIED | DECLINED

Any step may end in FAILED instead. The downloaded master copy lives in a
TempResource scope, so no temporary file survives the transaction whichever
leaf it reaches. Failures are returned as reports, never raised, so a batch
keeps going after a bad file.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from codebit_core import (
    CodeBitDescriptor,
    DescriptorError,
    FailureKind,
    FetchError,
    MetadataSyntaxError,
    VersionOrder,
    extract_descriptor,
    parse_metadata,
    read_metadata,
    version_order,
)
from rich.console import Console
from rich.markup import escape

from codebit_sync.confirm import Confirmer, console_confirm
from codebit_sync.fetch import TEMP_PREFIX, TEMP_SUFFIX, Fetcher, TempResource

logger = logging.getLogger(__name__)


class UpdateState(Enum):
    """Where an update transaction ended up."""

    START = "start"
    LOCAL_LOADED = "local_loaded"
    LOCAL_VALIDATED = "local_validated"
    REMOTE_FETCHED = "remote_fetched"
    REMOTE_VALIDATED = "remote_validated"
    COMPARED = "compared"
    UP_TO_DATE = "up_to_date"
    ANOMALY_LOCAL_NEWER = "anomaly_local_newer"
    PENDING_CONFIRMATION = "pending_confirmation"
    APPLIED = "applied"
    DECLINED = "declined"
    FAILED = "failed"


@dataclass
class UpdateReport:
    """Outcome of updating a single local file."""

    path: Path
    state: UpdateState = UpdateState.START
    failure: FailureKind | None = None
    message: str = ""
    local: CodeBitDescriptor | None = None
    remote: CodeBitDescriptor | None = None
    order: VersionOrder | None = None
    status_code: int | None = None

    @property
    def failed(self) -> bool:
        return self.state is UpdateState.FAILED


class CodeBitUpdater:
    """Compare local CodeBits with their master copies and replace outdated ones."""

    def __init__(
        self,
        fetcher: Fetcher,
        *,
        confirm: Confirmer | None = None,
        console: Console | None = None,
        dry_run: bool = False,
    ):
        self.fetcher = fetcher
        self.console = console or Console()
        self.confirm = confirm or (lambda prompt: console_confirm(prompt, self.console))
        self.dry_run = dry_run

    # ---- output helpers ----------------------------------------------------
    def _say(self, text: str, style: str | None = None) -> None:
        self.console.print(f"   {escape(text)}", style=style)

    def _fail(
        self,
        report: UpdateReport,
        kind: FailureKind,
        message: str,
        *,
        status_code: int | None = None,
    ) -> UpdateReport:
        logger.warning(f"{report.path}: {kind.value} in state {report.state.value}: {message}")
        report.state = UpdateState.FAILED
        report.failure = kind
        report.message = message
        report.status_code = status_code
        self._say(message, style="red")
        return report

    def _finish(self, report: UpdateReport, state: UpdateState, message: str, style: str) -> UpdateReport:
        logger.info(f"{report.path}: {state.value}")
        report.state = state
        report.message = message
        self._say(message, style=style)
        return report

    # ---- single file -------------------------------------------------------
    def update_file(self, path: Path) -> UpdateReport:
        """Run one update transaction for a local CodeBit."""
        path = Path(path)
        report = UpdateReport(path=path)
        self.console.print()
        self.console.print(escape(str(path)), style="bold")

        try:
            mapping = read_metadata(path)
        except MetadataSyntaxError as e:
            return self._fail(report, FailureKind.SYNTAX_ERROR, f"YAML Syntax Error: {e}")
        except OSError as e:
            return self._fail(report, FailureKind.IO_ERROR, f"Could not read file: {e}")
        report.state = UpdateState.LOCAL_LOADED

        for key in ("name", "description"):
            if key in mapping:
                self._say(f"{key}: {mapping[key]}")

        try:
            local = extract_descriptor(mapping)
        except DescriptorError as e:
            return self._fail(report, e.kind, str(e))
        report.local = local
        report.state = UpdateState.LOCAL_VALIDATED
        self._say(f"version: {local.version}")
        self._say(f"url: {local.url}")

        self._say("Retrieving master copy...")
        try:
            resource = self.fetcher.fetch(local.url, path.parent)
        except FetchError as e:
            return self._fail(
                report, FailureKind.FETCH_ERROR, f"Web Error: {e}", status_code=e.status_code
            )

        with resource:
            report.state = UpdateState.REMOTE_FETCHED
            return self._update_from_master(report, resource)

    def _update_from_master(self, report: UpdateReport, resource: TempResource) -> UpdateReport:
        local = report.local
        try:
            remote = extract_descriptor(parse_metadata(resource.read_text()))
        except MetadataSyntaxError as e:
            return self._fail(report, FailureKind.SYNTAX_ERROR, f"YAML Syntax Error on master copy: {e}")
        except DescriptorError as e:
            return self._fail(report, e.kind, f"Master copy: {e}")
        except OSError as e:
            return self._fail(report, FailureKind.IO_ERROR, f"Could not read master copy: {e}")
        report.remote = remote
        report.state = UpdateState.REMOTE_VALIDATED

        report.order = version_order(remote.version, local.version)
        report.state = UpdateState.COMPARED

        if report.order is VersionOrder.EQUAL:
            return self._finish(report, UpdateState.UP_TO_DATE, "Local CodeBit is up to date!", "green")

        if report.order is VersionOrder.LOCAL_NEWER:
            return self._finish(
                report,
                UpdateState.ANOMALY_LOCAL_NEWER,
                "Unexpected: Local CodeBit has newer version than master copy. "
                f"Local version: '{local.version}'  Master version: '{remote.version}'",
                "yellow",
            )

        report.state = UpdateState.PENDING_CONFIRMATION
        if self.dry_run:
            return self._finish(
                report,
                UpdateState.DECLINED,
                f"Master version is newer. Dry run: would update to version '{remote.version}'.",
                "cyan",
            )

        prompt = f"   Master version is newer. Update local copy to version '{remote.version}'?"
        if not self.confirm(prompt):
            return self._finish(report, UpdateState.DECLINED, "Update declined.", "dim")

        try:
            resource.commit(report.path)
        except OSError as e:
            return self._fail(report, FailureKind.IO_ERROR, f"Could not replace local copy: {e}")
        return self._finish(
            report,
            UpdateState.APPLIED,
            f"'{report.path.name}' updated to version '{remote.version}'.",
            "green",
        )

    # ---- batches -----------------------------------------------------------
    def find_matches(self, pattern: str, recursive: bool = False) -> list[Path]:
        """
        Expand a path with wildcards in its final component.

        Raises:
            ValueError: the pattern has no file-name part.
            FileNotFoundError: the directory part does not exist.
        """
        directory, name_pattern = os.path.split(pattern)
        if not name_pattern:
            raise ValueError(f"Pattern '{pattern}' does not name any files")
        base = Path(directory or ".").expanduser().resolve()
        if not base.is_dir():
            raise FileNotFoundError(f"Directory not found: {base}")

        candidates = base.rglob(name_pattern) if recursive else base.glob(name_pattern)
        return sorted(
            p
            for p in candidates
            if p.is_file() and not (p.name.startswith(TEMP_PREFIX) and p.name.endswith(TEMP_SUFFIX))
        )

    def update_pattern(self, pattern: str, recursive: bool = False) -> list[UpdateReport]:
        """Update every file matching ``pattern``; one file's failure never stops the rest."""
        # Snapshot first: updates replace files while we iterate.
        matches = self.find_matches(pattern, recursive)
        directory, name_pattern = os.path.split(pattern)
        shown = Path(directory or ".").expanduser().resolve() / name_pattern
        self.console.print(f"Updating CodeBits: {escape(str(shown))}", style="cyan")

        if not matches:
            self.console.print("  No matches found.", style="yellow")
            return []

        return [self.update_file(path) for path in matches]
