# Copyright 2023 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT

# Output of GrokAssembly looks like:
# <assembly>
#   <companyName>...</companyName>
#   <productName>...</productName>
#   <productVersion>...</productVersion>
#   <fileVersion>...</fileVersion>
#   <fileDescription>...</fileDescription>
#   <internalName>...</internalName>
#   <originalFilename>...</originalFilename>
#   <namespaces><namespace>...</namespace></namespaces>
#   <error>...</error>
#   <warning>...</warning>
# </assembly>

from typing import IO, Optional, Union
from xml.etree.ElementTree import Element

import defusedxml
import defusedxml.ElementTree

from assemblyscan.errors import GrokParseError

from .models import ExtractionResult

# element name -> ExtractionResult field
_TEXT_FIELDS = {
    "companyName": "company_name",
    "productName": "product_name",
    "productVersion": "product_version",
    "fileVersion": "file_version",
    "fileDescription": "file_description",
    "internalName": "internal_name",
    "originalFilename": "original_filename",
    "error": "error",
    "warning": "warning",
}


def _text(element: Optional[Element]) -> Optional[str]:
    if element is None or element.text is None:
        return None
    text = element.text.strip()
    return text if text else None


def parse(data: Union[bytes, str, IO[bytes]]) -> ExtractionResult:
    """Parse the XML document written by the helper tool.

    Args:
        data (Union[bytes, str, IO[bytes]]): The helper's standard output, or a stream to read it from.

    Returns:
        ExtractionResult: The values reported by the helper. Empty elements are returned as None.

    Raises:
        GrokParseError: If the output is not well-formed XML or is not an <assembly> document.
    """
    if hasattr(data, "read"):
        data = data.read()
    if not data or not data.strip():
        raise GrokParseError("No output was received from GrokAssembly")
    try:
        root = defusedxml.ElementTree.fromstring(data)
    except (defusedxml.ElementTree.ParseError, defusedxml.DefusedXmlException) as e:
        raise GrokParseError(f"Couldn't parse Assembly Analyzer results (GrokAssembly): {e}") from e

    if root.tag != "assembly":
        raise GrokParseError(f"Unexpected root element <{root.tag}> in GrokAssembly output")

    values = {field: _text(root.find(tag)) for tag, field in _TEXT_FIELDS.items()}
    namespaces = []
    for ns in root.findall("./namespaces/namespace"):
        if name := _text(ns):
            namespaces.append(name)
    return ExtractionResult(namespaces=tuple(namespaces), **values)
