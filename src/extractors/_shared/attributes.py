"""Attribute list building shared by the data-source extractors."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from core.enums import AttributeType
from core.findings import Attribute, AttributeValue


def collect_attributes(
    source: str,
    values: Iterable[Tuple[AttributeType, Optional[AttributeValue]]],
) -> List[Attribute]:
    """
    Build attributes from (type, value) pairs, dropping missing values.

    None and empty strings are dropped; zero is kept.

    Example:
        >>> collect_attributes("Chrome", [(AttributeType.URL, "http://a"), (AttributeType.TITLE, None)])
        [Attribute(attribute_type=<AttributeType.URL: 'url'>, source='Chrome', value='http://a')]
    """
    attributes: List[Attribute] = []
    for attribute_type, value in values:
        if value is None:
            continue
        if isinstance(value, str):
            value = value.strip()
            if not value:
                continue
        attributes.append(Attribute(attribute_type, source, value))
    return attributes
