"""FormCraft form schema engine.

FormCraft lets non-programmers assemble data-collection forms from a fixed
palette of field types and validates submissions against the result. It
provides:
- A registry of field type definitions (defaults, configuration rules, value rules)
- An immutable, ordered designer document with single selection
- A submission validator producing per-field and aggregate verdicts
- A form lifecycle (draft, published, archived) with an audit event stream

Basic usage:
    >>> from formcraft import FormRuntime
    >>> runtime = FormRuntime(name="Feedback")
    >>> text_id = runtime.insert_field("TextField")
    >>> print(runtime.state.value)
    draft
"""

__version__ = "0.1.0"
__author__ = "FormCraft Team"

# Version info
VERSION = (0, 1, 0)

# Core exports
from formcraft.document import DesignerDocument
from formcraft.registry import DEFAULT_REGISTRY, FieldTypeRegistry
from formcraft.runtime import FormRuntime
from formcraft.types import FieldType, FormState
from formcraft.validation import SubmissionValidator, ValidationReport, validate

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "DEFAULT_REGISTRY",
    "DesignerDocument",
    "FieldType",
    "FieldTypeRegistry",
    "FormRuntime",
    "FormState",
    "SubmissionValidator",
    "ValidationReport",
    "validate",
]
