"""Field type registry.

The registry maps each ``FieldType`` tag to its definition. It is built once
at import time (``DEFAULT_REGISTRY``) and never mutated afterwards, so it can
be shared by every document and validator in the process without locking.

Usage:
    >>> from formcraft.registry import DEFAULT_REGISTRY
    >>> instance = DEFAULT_REGISTRY.construct("TextField", "fld_1")
    >>> instance.configuration["label"]
    'Text field'
"""

import logging
from types import MappingProxyType
from typing import Iterable, List, Mapping, Union

from formcraft.errors import UnknownFieldType
from formcraft.fields import FIELD_DEFINITIONS, FieldInstance, FieldTypeDefinition
from formcraft.types import FieldType

logger = logging.getLogger(__name__)

TagLike = Union[FieldType, str]


class FieldTypeRegistry:
    """Read-only mapping from field type tag to field type definition.

    Attributes:
        definitions: Tag -> definition, in registration (palette) order

    Raises:
        ValueError: At construction, if two definitions share a tag
    """

    def __init__(self, definitions: Iterable[FieldTypeDefinition]):
        registered = {}
        for definition in definitions:
            if definition.type in registered:
                raise ValueError(
                    f"Field type {definition.type.value!r} is registered more than once"
                )
            registered[definition.type] = definition
        self.definitions: Mapping[FieldType, FieldTypeDefinition] = MappingProxyType(registered)

    def __contains__(self, tag: object) -> bool:
        try:
            return self._coerce(tag) in self.definitions
        except UnknownFieldType:
            return False

    def __len__(self) -> int:
        return len(self.definitions)

    @staticmethod
    def _coerce(tag: object) -> FieldType:
        if isinstance(tag, FieldType):
            return tag
        try:
            return FieldType(tag)
        except ValueError:
            raise UnknownFieldType(tag) from None

    def tags(self) -> List[FieldType]:
        return list(self.definitions)

    def resolve(self, tag: TagLike) -> FieldTypeDefinition:
        """Return the definition registered for ``tag``.

        Args:
            tag: A FieldType member or its string value (e.g. ``"TextField"``)

        Raises:
            UnknownFieldType: If the tag is not registered
        """
        field_type = self._coerce(tag)
        definition = self.definitions.get(field_type)
        if definition is None:
            raise UnknownFieldType(tag)
        return definition

    def construct(self, tag: TagLike, instance_id: str) -> FieldInstance:
        """Create a new instance of ``tag`` with a private copy of its defaults."""
        instance = self.resolve(tag).construct(instance_id)
        logger.debug("Constructed %s instance %s", instance.type.value, instance_id)
        return instance

    def is_layout_only(self, tag: TagLike) -> bool:
        return self.resolve(tag).layout_only


DEFAULT_REGISTRY = FieldTypeRegistry(definition() for definition in FIELD_DEFINITIONS)


__all__ = [
    "FieldTypeRegistry",
    "DEFAULT_REGISTRY",
]
