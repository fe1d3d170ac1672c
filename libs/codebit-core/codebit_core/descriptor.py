"""Turn decoded metadata into a CodeBitDescriptor."""

import re
from collections.abc import Mapping

from codebit_core.errors import DescriptorError, FailureKind
from codebit_core.models import CodeBitDescriptor

CODEBIT_KEYWORD = "CodeBit"
KEYWORD_SPLIT_RE = re.compile(r"[,;]")
KEYWORD_STRIP = " \t#"


def split_keywords(text: str) -> list[str]:
    """Split a ``keywords`` value on commas/semicolons, trimming spaces, tabs and '#'."""
    tokens = (tok.strip(KEYWORD_STRIP) for tok in KEYWORD_SPLIT_RE.split(text or ""))
    return [tok for tok in tokens if tok]


def has_keyword(mapping: Mapping[str, str], keyword: str) -> bool:
    """True if the mapping's ``keywords`` contain ``keyword`` (case-insensitive)."""
    keywords = mapping.get("keywords")
    if keywords is None:
        return False
    wanted = keyword.casefold()
    return any(tok.casefold() == wanted for tok in split_keywords(keywords))


def extract_descriptor(mapping: Mapping[str, str]) -> CodeBitDescriptor:
    """
    Validate a metadata mapping and build its descriptor.

    Raises:
        DescriptorError: with kind NOT_A_CODEBIT, MISSING_VERSION or
            MISSING_URL, checked in that order.
    """
    if not has_keyword(mapping, CODEBIT_KEYWORD):
        raise DescriptorError(FailureKind.NOT_A_CODEBIT, "Not a CodeBit.")

    version = mapping.get("version")
    if version is None:
        raise DescriptorError(FailureKind.MISSING_VERSION, "CodeBit missing 'version' property.")

    url = mapping.get("url")
    if url is None:
        raise DescriptorError(FailureKind.MISSING_URL, "CodeBit missing 'url' property.")

    return CodeBitDescriptor(
        name=mapping.get("name"),
        description=mapping.get("description"),
        keywords=split_keywords(mapping["keywords"]),
        version=version,
        url=url,
    )


def require_name(descriptor: CodeBitDescriptor) -> str:
    """Return the descriptor's name; retrieval has no other way to pick a filename."""
    if not descriptor.name:
        raise DescriptorError(FailureKind.MISSING_NAME, "CodeBit missing 'name' property.")
    return descriptor.name
