"""外部チェッカーの呼び出し。

公開 API:
    - 引数: CheckArguments, create_check_arguments, write_argument_file
    - 実行: run_check, CheckError, CommandFailedError, ResponseDecodeError
"""

from pyre_client.check._arguments import (
    BuckSourcePaths,
    CheckArguments,
    SimpleSourcePaths,
    create_check_arguments,
    get_source_paths,
    write_argument_file,
)
from pyre_client.check._runner import (
    CheckError,
    CommandFailedError,
    ResponseDecodeError,
    parse_type_error_response,
    run_check,
)

__all__ = [
    "BuckSourcePaths",
    "CheckArguments",
    "CheckError",
    "CommandFailedError",
    "ResponseDecodeError",
    "SimpleSourcePaths",
    "create_check_arguments",
    "get_source_paths",
    "parse_type_error_response",
    "run_check",
    "write_argument_file",
]
