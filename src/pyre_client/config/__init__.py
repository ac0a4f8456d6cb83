"""設定解決モジュール。"""

from pyre_client.config._locator import (
    CONFIGURATION_FILE,
    LOCAL_CONFIGURATION_FILE,
    LOG_DIRECTORY,
    FoundRoot,
    find_global_and_local_root,
    find_parent_directory_containing_file,
    get_relative_local_root,
)
from pyre_client.config._partial import (
    DecodedPartialConfiguration,
    expand_relative_paths,
    merge_partial_configurations,
    partial_configuration_from_command_arguments,
    partial_configuration_from_file,
    partial_configuration_from_string,
)
from pyre_client.config._resolver import (
    configuration_from_partial_configuration,
    create_configuration,
)

__all__ = [
    "CONFIGURATION_FILE",
    "LOCAL_CONFIGURATION_FILE",
    "LOG_DIRECTORY",
    "DecodedPartialConfiguration",
    "FoundRoot",
    "configuration_from_partial_configuration",
    "create_configuration",
    "expand_relative_paths",
    "find_global_and_local_root",
    "find_parent_directory_containing_file",
    "get_relative_local_root",
    "merge_partial_configurations",
    "partial_configuration_from_command_arguments",
    "partial_configuration_from_file",
    "partial_configuration_from_string",
]
