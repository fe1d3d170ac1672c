"""CodeBit Sync - fetch, compare, and replace CodeBits from their master copies."""

from codebit_sync.confirm import Confirmer, always_yes, console_confirm
from codebit_sync.fetch import Fetcher, TempResource
from codebit_sync.retrieve import CodeBitRetriever, RetrieveReport, RetrieveState
from codebit_sync.update import CodeBitUpdater, UpdateReport, UpdateState

__all__ = [
    "CodeBitUpdater",
    "UpdateReport",
    "UpdateState",
    "CodeBitRetriever",
    "RetrieveReport",
    "RetrieveState",
    "Fetcher",
    "TempResource",
    "Confirmer",
    "always_yes",
    "console_confirm",
]

__version__ = "0.1.0"
