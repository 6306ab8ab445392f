"""jjbuild — incremental build orchestrator for JavaCC-family grammars."""

__all__ = [
    "__version__",
    "load_config",
    "run_pipeline",
    "scan_grammars",
    "validate_instance",
    # Model
    "GrammarInfo",
    "ScanResult",
    "RunResult",
    # Errors
    "JJBuildError",
    "ReadError",
    "RelocationError",
    "InvalidConfiguration",
    "ToolFailure",
    "ScanError",
]
__version__ = "0.1.0"

# Programmatic entrypoints: see jjbuild/api.py.
from jjbuild.api import (  # noqa: E402, F401
    load_config,
    run_pipeline,
    scan_grammars,
    validate_instance,
)
from jjbuild.errors import (  # noqa: E402, F401
    InvalidConfiguration,
    JJBuildError,
    ReadError,
    RelocationError,
    ScanError,
    ToolFailure,
)
from jjbuild.model.grammar_info import GrammarInfo  # noqa: E402, F401
from jjbuild.model.run_result import RunResult  # noqa: E402, F401
from jjbuild.model.scan_result import ScanResult  # noqa: E402, F401
