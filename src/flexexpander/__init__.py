"""flexexpander - Nested ${...} string template expansion.

Compiles raw strings with nested placeholder expressions into immutable
templates and expands them against a context, with locale and time zone
aware formatting (Babel) and sandboxed scripted expressions (Jinja2).

Public API:
    FlexibleStringExpander - Compiled template with expand()/expand_string()
    compile_template - Compile raw text through the shared cache
    expand_string - One-shot expansion
    parse_template - Compile raw text without caching
    serialize_template - Rebuild raw text from a compiled template
    ExpansionResult - Rendered text, passthrough value and collected errors

Exceptions:
    ExpanderError - Base exception class
    EvaluationError - Expression or script failures
    FormatError - Directive and formatting failures

Submodules:
    flexexpander.syntax.ast - Compiled template node types
    flexexpander.runtime.evaluator - Evaluator protocol and bundled evaluators
    flexexpander.runtime.directives - Format directive registry
    flexexpander.runtime.cache - Thread-safe compiled template cache
    flexexpander.diagnostics - Error types and diagnostic codes
"""

# Essential Public API - Minimal exports for clean namespace
from .diagnostics import EvaluationError, ExpanderError, FormatError
from .runtime import ExpansionResult, FlexibleStringExpander, compile_template, expand_string
from .syntax import parse as parse_template
from .syntax import serialize as serialize_template

# Version information - Auto-populated from package metadata
from importlib.metadata import PackageNotFoundError  # noqa: E402
from importlib.metadata import version as _get_version  # noqa: E402

try:
    __version__ = _get_version("flexexpander")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "EvaluationError",
    "ExpanderError",
    "ExpansionResult",
    "FlexibleStringExpander",
    "FormatError",
    "__version__",
    "compile_template",
    "expand_string",
    "parse_template",
    "serialize_template",
]
