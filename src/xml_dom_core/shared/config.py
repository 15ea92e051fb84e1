"""Configuration record for the document builder and serializer.

``DOMConfiguration`` plays the role of the DOM Level 3 ``DOMConfiguration``
object: a set of named boolean and string parameters consumed by the builder
(while materializing a tree) and by the serializer (while writing one). It can
be addressed either as a plain dataclass or through the DOM-style
``get_parameter`` / ``set_parameter`` interface, which accepts DOM names
(``element-content-whitespace``), camelCase names (``elementContentWhitespace``)
and snake_case attribute names alike.
"""

import json
import re
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, List, Optional

from .constants import DEFAULT_BUFFER_SIZE, DEFAULT_INDENT, XML_WHITESPACE
from .errors import NotFoundError

# Aliases that do not follow the field-name spelling
_PARAMETER_ALIASES = {
    "formatprettyprint": "pretty_print",
    "xmldeclaration": "xml_declaration",
}

_NAME_SEPARATORS = re.compile(r"[-_\s]")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass
class DOMConfiguration:
    """Declarative toggles consumed by the builder and the serializer.

    Unlike most configuration records in this package the object is mutable,
    because ``Document.dom_config`` is updated in place through
    ``set_parameter`` the same way DOM hosts expect.
    """

    cdata_sections: bool = True                 # Accepted; CDATA content is kept as Text
    comments: bool = True                       # Keep Comment nodes while parsing
    element_content_whitespace: bool = True     # Keep whitespace-only Text between tags
    namespaces: bool = True                     # Namespace-aware parsing and normalization
    namespace_declarations: bool = True         # Emit xmlns* attributes when serializing
    normalize_characters: bool = False          # NFC-normalize character data while parsing
    omit_xml_declaration: bool = False          # Suppress the <?xml ...?> line
    pretty_print: bool = False                  # Indent and newline serializer output
    indent_character: str = DEFAULT_INDENT      # Per-level indent when pretty printing
    buffer_size: int = DEFAULT_BUFFER_SIZE      # Bytes handed to the tokenizer per read

    def __post_init__(self) -> None:
        """Validate configuration."""
        for config_field in fields(self):
            if config_field.type in (bool, "bool"):
                value = getattr(self, config_field.name)
                if not isinstance(value, bool):
                    raise ConfigValidationError(
                        f"{config_field.name} must be a bool, got {type(value).__name__}",
                        field_name=config_field.name,
                    )
        if not isinstance(self.indent_character, str):
            raise ConfigValidationError(
                "indent_character must be a string", field_name="indent_character"
            )
        if any(ch not in XML_WHITESPACE for ch in self.indent_character):
            raise ConfigValidationError(
                "indent_character may only contain XML whitespace",
                field_name="indent_character",
                suggestions=["Use spaces or a tab character"],
            )
        if isinstance(self.buffer_size, bool) or not isinstance(self.buffer_size, int):
            raise ConfigValidationError(
                "buffer_size must be an integer", field_name="buffer_size"
            )
        if self.buffer_size <= 0:
            raise ConfigValidationError(
                "buffer_size must be > 0",
                field_name="buffer_size",
                suggestions=[f"Use the default of {DEFAULT_BUFFER_SIZE}"],
            )

    # DOM-style parameter access

    @classmethod
    def parameter_names(cls) -> List[str]:
        """DOM names of every recognized parameter."""
        return [f.name.replace("_", "-") for f in fields(cls)]

    @classmethod
    def _resolve_parameter(cls, name: str) -> str:
        key = _NAME_SEPARATORS.sub("", name).lower()
        if key in _PARAMETER_ALIASES:
            return _PARAMETER_ALIASES[key]
        for config_field in fields(cls):
            if config_field.name.replace("_", "") == key:
                return config_field.name
        raise NotFoundError(f"unknown configuration parameter '{name}'")

    def get_parameter(self, name: str) -> Any:
        """Return the value of a parameter.

        Raises:
            NotFoundError: If the parameter is not recognized
        """
        field_name = self._resolve_parameter(name)
        if field_name == "xml_declaration":
            return not self.omit_xml_declaration
        return getattr(self, field_name)

    def can_set_parameter(self, name: str, value: Any) -> bool:
        """Whether ``set_parameter(name, value)`` would succeed."""
        try:
            field_name = self._resolve_parameter(name)
            candidate = self._with_parameter(field_name, value)
            candidate.__post_init__()
        except (NotFoundError, ConfigValidationError, TypeError):
            return False
        return True

    def set_parameter(self, name: str, value: Any) -> None:
        """Set a parameter in place.

        Raises:
            NotFoundError: If the parameter is not recognized
            ConfigValidationError: If the value has the wrong type or is invalid
        """
        field_name = self._resolve_parameter(name)
        candidate = self._with_parameter(field_name, value)
        for config_field in fields(self):
            setattr(self, config_field.name, getattr(candidate, config_field.name))

    def _with_parameter(self, field_name: str, value: Any) -> "DOMConfiguration":
        if field_name == "xml_declaration":
            if not isinstance(value, bool):
                raise ConfigValidationError(
                    "xml-declaration must be a bool", field_name="xml_declaration"
                )
            return replace(self, omit_xml_declaration=not value)
        return replace(self, **{field_name: value})

    # Copies and serialization

    def override(self, **kwargs: Any) -> "DOMConfiguration":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = DOMConfiguration().override(pretty_print=True)
        """
        try:
            return replace(self, **kwargs)
        except TypeError as e:
            raise ConfigValidationError(
                str(e), suggestions=[f"Known fields: {', '.join(self.to_dict())}"]
            ) from e

    def copy(self) -> "DOMConfiguration":
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DOMConfiguration":
        """Create configuration from dictionary.

        Keys may use any spelling accepted by ``set_parameter``.
        """
        config = cls()
        for name, value in data.items():
            try:
                config.set_parameter(name, value)
            except NotFoundError as e:
                raise ConfigValidationError(
                    e.message, field_name=name,
                    suggestions=[f"Known parameters: {', '.join(cls.parameter_names())}"],
                ) from e
        return config

    @classmethod
    def from_json(cls, json_str: str) -> "DOMConfiguration":
        """Create configuration from JSON string."""
        data = json.loads(json_str)
        if not isinstance(data, dict):
            raise ConfigValidationError("configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods

    @classmethod
    def pretty_printing(cls, indent_character: str = DEFAULT_INDENT) -> "DOMConfiguration":
        """Human-readable output: indentation and one node per line."""
        return cls(pretty_print=True, indent_character=indent_character)

    @classmethod
    def data_only(cls) -> "DOMConfiguration":
        """Parse only data-bearing nodes: no comments, no indentation whitespace."""
        return cls(comments=False, element_content_whitespace=False)

    @classmethod
    def fragment_output(cls) -> "DOMConfiguration":
        """Serialize without the XML declaration, for embedding output in other documents."""
        return cls(omit_xml_declaration=True)
