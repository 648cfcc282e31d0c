"""Turn OpenAPI names into Python identifiers.

Patterns:
  - operationId          -> snake_case function name
  - parameter name       -> snake_case argument name
  - schema name          -> class name (kept as-is when already valid
                            and not taken by the generated modules)
  - anonymous type owner -> {OwnerInClassCase}AnonArg{n}

Examples:
  listPets            -> list_pets
  X-Request-ID        -> x_request_id
  class               -> class_
  pet-status          -> PetStatus
  Response            -> Response_
  myOperationId, 1    -> MyOperationIdAnonArg1
"""

from __future__ import annotations

import keyword
import re

# Free names the generated modules rely on; models are star-imported next
# to them, so a schema class must never take one of these names.
RESERVED_NAMES = frozenset({
    "Annotated", "Any", "BaseModel", "Body", "Callable", "ConfigDict", "Cookie",
    "FastAPI", "Field", "Header", "NotImplementedError", "Optional", "Path",
    "Query", "Response", "Union", "annotations", "app", "bool", "endpoint",
    "float", "int", "list", "main", "mount_api", "os", "str", "uvicorn",
})


def camel_to_snake(name: str) -> str:
    """Convert camelCase or PascalCase to snake_case."""
    s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    return re.sub(r"([a-z\d])([A-Z])", r"\1_\2", s1).lower()


def _keyword_safe(name: str) -> str:
    if keyword.iskeyword(name) or keyword.issoftkeyword(name):
        return name + "_"
    return name


def to_identifier(name: str) -> str:
    """Sanitize an arbitrary name into a snake_case Python identifier."""
    ident = camel_to_snake(name)
    ident = re.sub(r"[^a-z0-9_]", "_", ident)
    ident = re.sub(r"_+", "_", ident).strip("_")
    if not ident:
        return "value"
    if ident[0].isdigit():
        ident = "_" + ident
    return _keyword_safe(ident)


def function_name(operation_id: str) -> str:
    """Build the generated function name for an operation."""
    return to_identifier(operation_id)


def class_case(name: str) -> str:
    """Upper-case the first letter of every word: myOperationId -> MyOperationId."""
    words = [w for w in re.split(r"[^A-Za-z0-9]+", name) if w]
    return "".join(w[0].upper() + w[1:] for w in words)


def class_name(name: str) -> str:
    """Return a class name for a schema, keeping valid identifiers untouched."""
    if name.isidentifier() and not keyword.iskeyword(name) and not name.startswith("_"):
        cased = name
    else:
        cased = class_case(name)
        if not cased or cased[0].isdigit():
            cased = "Schema" + cased
    if cased in RESERVED_NAMES:
        return cased + "_"
    return cased


def anonymous_type_name(owner: str, index: int) -> str:
    """Name the index-th anonymous type synthesized for owner."""
    cased = class_case(owner)
    if not cased or cased[0].isdigit():
        cased = "Op" + cased
    return f"{cased}AnonArg{index}"


def docstring_line(text: str) -> str:
    """Collapse whitespace and escape text for use inside a triple-quoted docstring."""
    text = re.sub(r"\s+", " ", text).strip()
    text = text.replace("\\", "\\\\")
    if text.endswith('"'):
        text = text[:-1] + '\\"'
    return text.replace('"""', '\\"\\"\\"')
