"""Designer document model.

A ``DesignerDocument`` is the ordered list of field instances that make up one
form, plus the instance currently selected in the designer. Documents are
immutable: every operation returns a new document and leaves the receiver
untouched, so a snapshot handed to another holder (a published schema, an undo
stack) can never change under it.

Invariants, checked on construction and preserved by every operation:
- instance ids are unique
- ``selected_id`` is either None or the id of an instance in the document
- order is insertion/move order and is the visual and submission order

Usage:
    >>> doc = DesignerDocument()
    >>> doc, text_id = doc.insert("TextField")
    >>> doc, title_id = doc.insert("TitleField", at_index=0)
    >>> [i.type.value for i in doc]
    ['TitleField', 'TextField']
    >>> doc = doc.select(text_id)
    >>> doc.selected.type.value
    'TextField'
"""

import logging
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from formcraft.errors import (
    InstanceNotFound,
    InvalidConfiguration,
    InvalidDocument,
    InvalidIndex,
)
from formcraft.fields import SUBMISSION_ENCODING_VERSION, FieldInstance
from formcraft.fields.base import thaw
from formcraft.registry import DEFAULT_REGISTRY, FieldTypeRegistry, TagLike
from formcraft.settings import get_settings

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


def generate_instance_id() -> str:
    """Generate a new field instance id (e.g. ``fld_3f9a0c1b2d4e5f60``)."""
    return f"{get_settings().id_prefix}{uuid.uuid4().hex[:16]}"


@dataclass(frozen=True)
class DesignerDocument:
    """Ordered, single-selection collection of field instances.

    Attributes:
        instances: Field instances in display/submission order
        selected_id: Id of the selected instance, if any
        registry: Field type registry used to construct and validate instances
        id_factory: Callable producing candidate ids for new instances

    Errors:
        InvalidIndex: insert/move target outside the document
        InstanceNotFound: id not present in the document
        InvalidConfiguration: configuration rejected by its field type
        UnknownFieldType: tag not present in the registry
    """

    instances: Tuple[FieldInstance, ...] = ()
    selected_id: Optional[str] = None
    registry: FieldTypeRegistry = field(default=DEFAULT_REGISTRY, compare=False, repr=False)
    id_factory: Callable[[], str] = field(
        default=generate_instance_id, compare=False, repr=False
    )

    def __post_init__(self):
        """Normalize instances to a tuple and check the document invariants."""
        if not isinstance(self.instances, tuple):
            object.__setattr__(self, "instances", tuple(self.instances))

        seen = set()
        for instance in self.instances:
            if instance.id in seen:
                raise InvalidDocument(f"Duplicate field instance id: {instance.id!r}")
            seen.add(instance.id)

        if self.selected_id is not None and self.selected_id not in seen:
            raise InvalidDocument(
                f"Selected id {self.selected_id!r} does not reference a field instance"
            )

    def __len__(self) -> int:
        return len(self.instances)

    def __iter__(self) -> Iterator[FieldInstance]:
        return iter(self.instances)

    def __contains__(self, instance_id: object) -> bool:
        return any(instance.id == instance_id for instance in self.instances)

    @property
    def ids(self) -> List[str]:
        return [instance.id for instance in self.instances]

    @property
    def selected(self) -> Optional[FieldInstance]:
        """The selected instance, or None when nothing is selected."""
        if self.selected_id is None:
            return None
        return self.get(self.selected_id)

    def index_of(self, instance_id: str) -> int:
        """Return the position of ``instance_id``.

        Raises:
            InstanceNotFound: If no instance has this id
        """
        for index, instance in enumerate(self.instances):
            if instance.id == instance_id:
                return index
        raise InstanceNotFound(instance_id)

    def get(self, instance_id: str) -> FieldInstance:
        return self.instances[self.index_of(instance_id)]

    def columns(self) -> List[Tuple[str, str]]:
        """Return ``(id, label)`` for each value-bearing field, in document order.

        This is the column definition used when exporting collected submissions.
        """
        return [
            (instance.id, instance.label or instance.id)
            for instance in self.instances
            if not self.registry.is_layout_only(instance.type)
        ]

    def _new_id(self) -> str:
        existing = set(self.ids)
        while True:
            candidate = self.id_factory()
            if candidate not in existing:
                return candidate
            logger.debug("Generated id %s collides with an existing instance, retrying", candidate)

    def insert(self, tag: TagLike, at_index: Optional[int] = None) -> Tuple["DesignerDocument", str]:
        """Insert a new instance of ``tag``.

        Args:
            tag: Field type tag of the new instance
            at_index: Position of the new instance; defaults to the end

        Returns:
            Tuple of (new document, id of the new instance)

        Raises:
            InvalidIndex: If ``at_index`` is negative or greater than the length
            UnknownFieldType: If ``tag`` is not registered

        Examples:
            >>> doc, first = DesignerDocument().insert("TextField")
            >>> doc, second = doc.insert("CheckboxField", at_index=0)
            >>> doc.ids == [second, first]
            True
        """
        length = len(self.instances)
        if at_index is None:
            at_index = length
        if at_index < 0 or at_index > length:
            raise InvalidIndex(at_index, length)

        instance = self.registry.construct(tag, self._new_id())
        instances = self.instances[:at_index] + (instance,) + self.instances[at_index:]
        logger.debug("Inserted %s %s at index %d", instance.type.value, instance.id, at_index)
        return replace(self, instances=instances), instance.id

    def remove_by_id(self, instance_id: str) -> "DesignerDocument":
        """Remove an instance, clearing the selection if it was selected.

        Raises:
            InstanceNotFound: If no instance has this id
        """
        index = self.index_of(instance_id)
        selected_id = None if self.selected_id == instance_id else self.selected_id
        logger.debug("Removed field instance %s from index %d", instance_id, index)
        return replace(
            self,
            instances=self.instances[:index] + self.instances[index + 1:],
            selected_id=selected_id,
        )

    def move_to(self, instance_id: str, new_index: int) -> "DesignerDocument":
        """Move an instance so that it ends up at ``new_index``.

        The relative order of all other instances is preserved. Out-of-range
        targets are rejected rather than clamped.

        Raises:
            InstanceNotFound: If no instance has this id
            InvalidIndex: Unless ``0 <= new_index < len(document)``

        Examples:
            >>> doc = DesignerDocument()
            >>> doc, a = doc.insert("TextField")
            >>> doc, b = doc.insert("TextField")
            >>> doc.move_to(b, 0).ids == [b, a]
            True
        """
        index = self.index_of(instance_id)
        length = len(self.instances)
        if new_index < 0 or new_index >= length:
            raise InvalidIndex(new_index, length)

        instances = list(self.instances)
        instance = instances.pop(index)
        instances.insert(new_index, instance)
        logger.debug("Moved field instance %s from index %d to %d", instance_id, index, new_index)
        return replace(self, instances=tuple(instances))

    def update_configuration(
        self, instance_id: str, configuration: Mapping[str, Any]
    ) -> "DesignerDocument":
        """Replace an instance's configuration after validating it.

        The update is atomic: when the configuration is rejected nothing
        changes and the receiver stays the current state.

        Raises:
            InstanceNotFound: If no instance has this id
            InvalidConfiguration: If the field type's validator rejects it
        """
        index = self.index_of(instance_id)
        instance = self.instances[index]
        definition = self.registry.resolve(instance.type)

        configuration = thaw(configuration)
        errors = definition.validate_configuration(configuration)
        if errors:
            logger.warning(
                "Rejected configuration for %s %s: %d error(s)",
                instance.type.value, instance_id, len(errors),
            )
            raise InvalidConfiguration(instance.type, errors)

        updated = replace(instance, configuration=configuration)
        instances = self.instances[:index] + (updated,) + self.instances[index + 1:]
        logger.debug("Updated configuration of %s", instance_id)
        return replace(self, instances=instances)

    def select(self, instance_id: Optional[str] = None) -> "DesignerDocument":
        """Select an instance, or clear the selection when called with None.

        Raises:
            InstanceNotFound: If a non-None id is not in the document
        """
        if instance_id is not None:
            self.index_of(instance_id)
        return replace(self, selected_id=instance_id)

    def serialize(self) -> Dict[str, Any]:
        """Convert the document to a persistence-ready dict.

        Examples:
            >>> DesignerDocument().serialize()
            {'version': 1, 'submissionEncoding': 1, 'selectedId': None, 'fields': []}
        """
        return {
            "version": SCHEMA_VERSION,
            "submissionEncoding": SUBMISSION_ENCODING_VERSION,
            "selectedId": self.selected_id,
            "fields": [instance.to_dict() for instance in self.instances],
        }

    @classmethod
    def deserialize(
        cls,
        payload: Mapping[str, Any],
        registry: FieldTypeRegistry = DEFAULT_REGISTRY,
        id_factory: Callable[[], str] = generate_instance_id,
    ) -> "DesignerDocument":
        """Rebuild a document from the output of ``serialize``.

        Every tag is resolved through ``registry`` and the whole load is
        aborted on the first failure, so a partially decoded document is never
        returned. Attributes missing from a stored configuration fall back to
        the field type's defaults. Records written with the legacy
        ``extraAttributes`` key are accepted. A ``selectedId`` that no longer
        references an instance is dropped.

        Raises:
            UnknownFieldType: If a record's tag is not registered
            InvalidConfiguration: If a stored configuration is rejected
            InvalidDocument: If the payload is structurally malformed or was
                written with an unsupported version or submission encoding
        """
        if not isinstance(payload, Mapping) or not isinstance(payload.get("fields"), list):
            raise InvalidDocument("Document payload must be an object with a 'fields' list")

        version = payload.get("version", SCHEMA_VERSION)
        if version != SCHEMA_VERSION:
            raise InvalidDocument(f"Unsupported document version: {version!r}")

        encoding = payload.get("submissionEncoding", SUBMISSION_ENCODING_VERSION)
        if encoding != SUBMISSION_ENCODING_VERSION:
            raise InvalidDocument(f"Unsupported submission encoding version: {encoding!r}")

        instances = []
        for position, record in enumerate(payload["fields"]):
            if not isinstance(record, Mapping):
                raise InvalidDocument(f"Field record at position {position} is not an object")
            instance_id = record.get("id")
            if not isinstance(instance_id, str) or not instance_id:
                raise InvalidDocument(f"Field record at position {position} has no id")

            definition = registry.resolve(record.get("type"))
            stored = record.get("configuration", record.get("extraAttributes", {}))
            if not isinstance(stored, Mapping):
                raise InvalidDocument(f"Configuration of field {instance_id!r} is not an object")

            configuration = definition.with_defaults(stored)
            errors = definition.validate_configuration(configuration)
            if errors:
                raise InvalidConfiguration(definition.type, errors)

            instances.append(FieldInstance(
                id=instance_id, type=definition.type, configuration=configuration,
            ))

        selected_id = payload.get("selectedId")
        if selected_id is not None and all(i.id != selected_id for i in instances):
            logger.warning("Dropping selection of missing field instance %s", selected_id)
            selected_id = None

        document = cls(
            instances=tuple(instances),
            selected_id=selected_id,
            registry=registry,
            id_factory=id_factory,
        )
        logger.debug("Deserialized document with %d field(s)", len(document))
        return document


__all__ = [
    "DesignerDocument",
    "SCHEMA_VERSION",
    "generate_instance_id",
]
