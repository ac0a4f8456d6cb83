"""pyre_client 値モデルパッケージ。"""

from pyre_client.models._base import PyreBaseModel
from pyre_client.models.command_arguments import CommandArguments, OutputFormat
from pyre_client.models.configuration import (
    Configuration,
    PartialConfiguration,
    ResolvedConfiguration,
)
from pyre_client.models.diagnostics import ConfigurationWarning, WarningKind
from pyre_client.models.exit_code import ExitCode
from pyre_client.models.extension import ExtensionElement
from pyre_client.models.ide_features import IdeFeatures
from pyre_client.models.platform_aware import PlatformAware
from pyre_client.models.python_version import InvalidPythonVersionError, PythonVersion
from pyre_client.models.search_path import (
    Element,
    RawElement,
    SimpleElement,
    SimpleRawElement,
)
from pyre_client.models.shared_memory import SharedMemory
from pyre_client.models.site_packages import SearchStrategy
from pyre_client.models.type_error import CheckResult, TypeCheckError
from pyre_client.models.unwatched import UnwatchedDependency, UnwatchedFiles

__all__ = [
    "CheckResult",
    "CommandArguments",
    "Configuration",
    "ConfigurationWarning",
    "Element",
    "ExitCode",
    "ExtensionElement",
    "IdeFeatures",
    "InvalidPythonVersionError",
    "OutputFormat",
    "PartialConfiguration",
    "PlatformAware",
    "PyreBaseModel",
    "PythonVersion",
    "RawElement",
    "ResolvedConfiguration",
    "SearchStrategy",
    "SharedMemory",
    "SimpleElement",
    "SimpleRawElement",
    "TypeCheckError",
    "UnwatchedDependency",
    "UnwatchedFiles",
    "WarningKind",
]
