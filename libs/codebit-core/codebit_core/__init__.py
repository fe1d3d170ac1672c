"""CodeBit Core - metadata decoding, descriptor validation, and version ordering."""

__version__ = "0.1.0"

from codebit_core.config import (  # noqa: E402
    FetchConfig,
    codebit_home_dir,
    config_path,
    load_config,
)
from codebit_core.descriptor import (  # noqa: E402
    CODEBIT_KEYWORD,
    extract_descriptor,
    has_keyword,
    require_name,
    split_keywords,
)
from codebit_core.errors import (  # noqa: E402
    CodeBitError,
    ConfigError,
    DescriptorError,
    FailureKind,
    FetchError,
    MetadataSyntaxError,
)
from codebit_core.metadata import find_metadata_block, parse_metadata, read_metadata  # noqa: E402
from codebit_core.models import CodeBitDescriptor, VersionOrder  # noqa: E402
from codebit_core.version import compare_versions, version_key, version_order  # noqa: E402

__all__ = [
    # config
    "FetchConfig",
    "codebit_home_dir",
    "config_path",
    "load_config",
    # descriptor
    "CODEBIT_KEYWORD",
    "extract_descriptor",
    "has_keyword",
    "require_name",
    "split_keywords",
    # errors
    "CodeBitError",
    "ConfigError",
    "DescriptorError",
    "FailureKind",
    "FetchError",
    "MetadataSyntaxError",
    # metadata
    "find_metadata_block",
    "parse_metadata",
    "read_metadata",
    # models
    "CodeBitDescriptor",
    "VersionOrder",
    # version
    "compare_versions",
    "version_key",
    "version_order",
]
