"""Pydantic models for data dictionary service payloads.

Payloads are validated here and mapped to the core model immediately,
so nothing past the service boundary deals with optional or untyped
fields.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nda_search.search.models import Element, StructureSummary


class ServiceModel(BaseModel):
    """Base for service payloads: camelCase aliases, unknown keys ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class StructureRef(ServiceModel):
    """Structure reference embedded in full-text hits."""

    short_name: str = Field(alias="shortName")
    title: str | None = None
    category: str | None = None


class DataElementDTO(ServiceModel):
    """``GET /dataelement/{name}`` response."""

    name: str
    type: str | None = None
    size: int | None = None
    description: str | None = None
    notes: str | None = None
    value_range: str | None = Field(default=None, alias="valueRange")
    data_structures: list[str] = Field(default_factory=list, alias="dataStructures")

    @field_validator("data_structures", mode="before")
    @classmethod
    def _structure_names(cls, value: Any) -> Any:
        # Some responses embed structure objects instead of short names.
        if value is None:
            return []
        if isinstance(value, list):
            return [
                item.get("shortName", "") if isinstance(item, dict) else item
                for item in value
            ]
        return value

    def to_element(self) -> Element:
        return Element(
            name=self.name,
            type=self.type or "String",
            description=self.description or "",
            notes=self.notes or None,
            structures=tuple(name for name in self.data_structures if name),
            value_range=self.value_range or None,
            size=self.size,
        )


class StructureElementDTO(ServiceModel):
    """Element entry inside a structure detail response."""

    name: str
    type: str | None = None
    size: int | None = None
    description: str | None = None
    notes: str | None = None
    value_range: str | None = Field(default=None, alias="valueRange")
    position: int | None = None

    def to_element(self, short_name: str) -> Element:
        return Element(
            name=self.name,
            type=self.type or "String",
            description=self.description or "",
            notes=self.notes or None,
            structures=(short_name,),
            value_range=self.value_range or None,
            size=self.size,
            position=self.position,
        )


class StructureSummaryDTO(ServiceModel):
    """Entry of a structure search or category listing."""

    short_name: str = Field(alias="shortName")
    title: str | None = None
    category: str | None = None
    categories: list[str] = Field(default_factory=list)

    def to_summary(self) -> StructureSummary:
        category = self.category or (self.categories[0] if self.categories else "")
        return StructureSummary(
            short_name=self.short_name,
            title=self.title or "",
            category=category,
        )


class StructureDetailDTO(ServiceModel):
    """``GET /datastructure/{shortName}`` response."""

    short_name: str | None = Field(default=None, alias="shortName")
    title: str | None = None
    data_elements: list[StructureElementDTO] = Field(
        default_factory=list, alias="dataElements"
    )

    def to_elements(self, short_name: str) -> list[Element]:
        """Map to elements ordered by their position in the structure."""
        ordered = sorted(
            self.data_elements,
            key=lambda e: e.position if e.position is not None else float("inf"),
        )
        return [entry.to_element(short_name) for entry in ordered]


class FullTextHitDTO(ServiceModel):
    """One hit of the full-text element search."""

    name: str
    type: str | None = None
    score: float = Field(default=0.0, alias="_score")
    data_structures: list[StructureRef] = Field(
        default_factory=list, alias="dataStructures"
    )

    @field_validator("score", mode="before")
    @classmethod
    def _null_score(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @field_validator("data_structures", mode="before")
    @classmethod
    def _null_structures(cls, value: Any) -> Any:
        return [] if value is None else value


class FullTextResultsDTO(ServiceModel):
    results: list[FullTextHitDTO] = Field(default_factory=list)


class FullTextResponseDTO(ServiceModel):
    """``POST /search/nda/dataelement/full`` response."""

    datadict: FullTextResultsDTO = Field(default_factory=FullTextResultsDTO)
