"""
Data-source descriptors.

These models are the wire contract for the list of available data sources
supplied by the host, either as JSON or as an in-process list. Field names
follow the host's format exactly::

    [
        {
            "id": "casedb",
            "uri": "jr://instance/casedb",
            "path": "/cases/case",
            "name": "Cases",
            "structure": {
                "name": {},
                "owner": {"reference": {"source": "users", "key": "@id"}},
                "group": {"name": "Group", "structure": {"size": {}}},
            },
            "subsets": [
                {
                    "id": "mother",
                    "key": "@case_type",
                    "name": "Mother",
                    "structure": {"edd": {}},
                    "related": {"parent": "household"},
                }
            ],
        }
    ]

A subset's structure is merged on top of the unfiltered structure, so every
element of the source is also available in each subset.
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hashpath.exceptions import DataSourceValidationError
from hashpath.settings import settings


class Reference(BaseModel):
    """Link from a structure element to another source or subset."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    source: str | None = None
    subset: str | None = None
    key: str


class ElementSpec(BaseModel):
    """
    One element of a source structure.

    An element with ``structure`` is a container, one with ``reference``
    links to another source, and one with neither is a leaf.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str | None = None
    structure: dict[str, "ElementSpec"] | None = None
    reference: Reference | None = None


class Subset(BaseModel):
    """Filtered view of a data source with possibly extended structure."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    key: str | None = None
    name: str | None = None
    structure: dict[str, ElementSpec] = Field(default_factory=dict)
    related: dict[str, str] | None = None


class DataSource(BaseModel):
    """Named, structured description of one data entity."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    uri: str = ""
    path: str = ""
    name: str = ""
    structure: dict[str, ElementSpec] = Field(default_factory=dict)
    subsets: list[Subset] = Field(default_factory=list)

    def get_subset(
        self, subset_id: str, preferred_key: str | None = None
    ) -> Subset | None:
        """
        Find a subset by id.

        Params:
            subset_id: Id of the subset
            preferred_key: Subset key to prefer when several share the id

        Returns:
            The matching subset, or None when the source has none by that id
        """
        matches = [subset for subset in self.subsets if subset.id == subset_id]
        if preferred_key is not None:
            for subset in matches:
                if subset.key == preferred_key:
                    return subset
        return matches[0] if matches else None


def merge_structure(
    base: dict[str, ElementSpec], extra: dict[str, ElementSpec]
) -> dict[str, ElementSpec]:
    """
    Merge a subset structure on top of a base structure.

    Elements only in ``base`` are kept, elements only in ``extra`` are added.
    When both define a container the nested structures are merged
    recursively; otherwise the ``extra`` element wins.
    """
    merged = dict(base)
    for element_id, spec in extra.items():
        existing = merged.get(element_id)
        if (
            existing is not None
            and existing.structure is not None
            and spec.structure is not None
        ):
            merged[element_id] = spec.model_copy(
                update={
                    "name": spec.name or existing.name,
                    "structure": merge_structure(existing.structure, spec.structure),
                }
            )
        else:
            merged[element_id] = spec
    return merged


def not_found_source(name: str | None = None) -> DataSource:
    """Placeholder source used when the host supplies no data sources."""
    return DataSource(id="", uri="", path="", name=name or settings.not_found_name)


def parse_data_sources(payload: str | bytes | list[Any]) -> list[DataSource]:
    """
    Validate a descriptor list against the wire contract.

    Params:
        payload: JSON text, or a list of descriptor dicts or DataSource objects

    Returns:
        Validated data sources in input order

    Raises:
        DataSourceValidationError: If the payload is not a list of valid descriptors
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise DataSourceValidationError(f"not valid JSON ({e})") from e

    if not isinstance(payload, list):
        raise DataSourceValidationError(
            f"expected a list of descriptors, got {type(payload).__name__}"
        )

    sources = []
    for item in payload:
        if isinstance(item, DataSource):
            sources.append(item)
            continue
        try:
            sources.append(DataSource.model_validate(item))
        except ValidationError as e:
            source_id = item.get("id") if isinstance(item, dict) else None
            raise DataSourceValidationError(str(e), source_id=source_id) from e
    return sources
