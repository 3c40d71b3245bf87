"""
Helpers for reading the XML input format.

Elements are handled through xml.etree.ElementTree. Tag names are matched
case-insensitively, and attribute lookups are tolerant: a missing or
unparsable attribute leaves the default in place.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, TypeVar, Type
from xml.etree import ElementTree

logger = logging.getLogger(__name__)

T = TypeVar("T", int, float, str, bool)


def tag_is(elem: ElementTree.Element, name: str) -> bool:
    """Case-insensitive tag comparison."""
    return isinstance(elem.tag, str) and elem.tag.lower() == name.lower()


def get_attribute(elem: ElementTree.Element, name: str, default: T,
                  lower_case: bool = False) -> T:
    """
    Read a typed attribute from an element.

    The attribute type is taken from the default value. Booleans accept
    true/false, yes/no, on/off and 1/0.

    Parameters:
        elem: XML element
        name: Attribute name
        default: Value returned when the attribute is absent or invalid
        lower_case: Convert string attributes to lower case

    Returns:
        Attribute value converted to the type of default
    """
    value = elem.get(name)
    if value is None:
        return default

    value = value.strip()
    kind: Type = type(default)
    if kind is str:
        return value.lower() if lower_case else value
    if kind is bool:
        if value.lower() in ("true", "yes", "on", "1"):
            return True
        if value.lower() in ("false", "no", "off", "0"):
            return False
        logger.warning(f"Invalid boolean attribute {name}=\"{value}\" in <{elem.tag}>")
        return default
    try:
        return kind(value)
    except ValueError:
        logger.warning(f"Invalid attribute {name}=\"{value}\" in <{elem.tag}>")
        return default


def get_text(elem: ElementTree.Element) -> Optional[str]:
    """Stripped text content of an element, or None if empty."""
    if elem.text is None:
        return None
    text = elem.text.strip()
    return text if text else None


def load_xml(filename: str | Path) -> ElementTree.Element:
    """Parse an XML input file and return its root element."""
    return ElementTree.parse(str(filename)).getroot()
