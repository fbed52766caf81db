"""Named entities: the cross-mention identity a set of mentions refers to.

Only a light model is provided here. A named entity carries:

- **name**: the canonical label, by convention the longest surface form seen;
- **surface_forms**: every literal string observed to designate it;
- **external_ids**: identifiers in external knowledge bases
  (e.g. ``{"wikidata": "Q90"}``).

Coreference is out of scope: the only comparison offered is a simple
set-based compatibility test (shared surface forms or shared external
ids), see :meth:`NamedEntity.is_compatible`.

Entities are frozen Pydantic models; the ``with_*`` and
:meth:`NamedEntity.complete_with` methods return updated copies.
"""

import logging

from pydantic import BaseModel, Field, model_validator

from mentionschema.types import MentionType

logger = logging.getLogger(__name__)


class NamedEntity(BaseModel, frozen=True):
    """An entity designated by one or more named mentions.

    Example:
        ```python
        paris = NamedEntity(type=MentionType.LOCATION, name="Paris")
        paris = paris.with_surface_form("la capitale").with_external_id("wikidata", "Q90")
        ```
    """

    type: MentionType = Field(description="Mention type shared by every mention of this entity.")
    name: str = Field(min_length=1, description="Canonical name of the entity.")
    surface_forms: tuple[str, ...] = Field(
        default=(),
        description="All strings observed to refer to the entity, sorted, always including the name.",
    )
    external_ids: dict[str, str] = Field(
        default_factory=dict,
        description="Knowledge base name mapped to the entity's id in that base.",
    )

    @model_validator(mode="before")
    @classmethod
    def _include_name_in_forms(cls, data):
        if isinstance(data, dict) and data.get("name"):
            forms = set(data.get("surface_forms") or ())
            forms.add(data["name"])
            data = {**data, "surface_forms": tuple(sorted(forms))}
        return data

    @model_validator(mode="after")
    def _check_named(self) -> "NamedEntity":
        if not self.type.is_named:
            raise ValueError(f"{self.type.value} is a valued type, it cannot designate a named entity")
        return self

    def with_surface_form(self, surface_form: str) -> "NamedEntity":
        return self.model_copy(update={"surface_forms": tuple(sorted(set(self.surface_forms) | {surface_form}))})

    def with_external_id(self, knowledge_base: str, external_id: str) -> "NamedEntity":
        ids = dict(self.external_ids)
        ids[knowledge_base] = external_id
        return self.model_copy(update={"external_ids": ids})

    def external_ids_intersect(self, other: "NamedEntity") -> bool:
        """True if both entities share the same id in at least one knowledge base."""
        return any(other.external_ids.get(kb) == ext_id for kb, ext_id in self.external_ids.items())

    def is_compatible(self, other: "NamedEntity") -> bool:
        """Cheap identity test: same type and a shared surface form or external id."""
        if self.type != other.type:
            return False
        if self.external_ids_intersect(other):
            return True
        return bool(set(self.surface_forms) & set(other.surface_forms))

    def complete_with(self, other: "NamedEntity") -> "NamedEntity":
        """Merge the information of ``other`` into a copy of this entity.

        The longest name wins, surface forms are unioned and external ids
        are merged.

        Raises:
            ValueError: If both entities hold different ids for the same
                knowledge base.
        """
        if self.type != other.type:
            logger.warning(
                "Trying to merge entities of different types: %s vs. %s (%s, %s)",
                self.type.value,
                other.type.value,
                self,
                other,
            )

        name = other.name if len(other.name) > len(self.name) else self.name
        ids = dict(self.external_ids)
        for kb, ext_id in other.external_ids.items():
            current = ids.get(kb)
            if current is None:
                ids[kb] = ext_id
            elif current != ext_id:
                raise ValueError(f"The specified entity has a different external id for KB {kb}: {current} vs. {ext_id}")

        return NamedEntity(
            type=self.type,
            name=name,
            surface_forms=tuple(set(self.surface_forms) | set(other.surface_forms)),
            external_ids=ids,
        )

    def __str__(self) -> str:
        result = f'{self.type.value}(NAME="{self.name}"'
        if self.external_ids:
            kb, ext_id = next(iter(self.external_ids.items()))
            result += f', {kb}="{ext_id}"'
        return result + ")"
