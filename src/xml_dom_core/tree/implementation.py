"""DOMImplementation: document and document type factories."""

from typing import Dict, FrozenSet, Optional

from ..character.names import check_namespace_binding, split_qualified_name
from ..shared.errors import WrongDocumentError
from .document import Document, DocumentType

SUPPORTED_FEATURES: Dict[str, FrozenSet[str]] = {
    "core": frozenset({"", "1.0", "2.0", "3.0"}),
    "xml": frozenset({"", "1.0", "2.0", "3.0"}),
}


class DOMImplementation:
    """Entry point for creating documents without parsing."""

    def has_feature(self, feature: str, version: Optional[str] = None) -> bool:
        """Whether ``feature`` (e.g. ``"Core"``, ``"+XML"``) is supported at ``version``."""
        versions = SUPPORTED_FEATURES.get(feature.lstrip("+").lower())
        return versions is not None and (version or "") in versions

    def create_document_type(
        self, qualified_name: str, public_id: str = "", system_id: str = ""
    ) -> DocumentType:
        """Create an unowned DocumentType for use with ``create_document``.

        Raises:
            InvalidCharacterError: If ``qualified_name`` is malformed
        """
        split_qualified_name(qualified_name)
        return DocumentType(None, qualified_name, public_id or "", system_id or "")

    def create_document(
        self,
        namespace_uri: Optional[str] = None,
        qualified_name: Optional[str] = None,
        doctype: Optional[DocumentType] = None,
    ) -> Document:
        """Create a document, optionally with a doctype and a document element.

        Raises:
            WrongDocumentError: If ``doctype`` already belongs to a document
            InvalidCharacterError: If ``qualified_name`` is malformed
            NamespaceError: If the prefix and namespace are inconsistent
        """
        if doctype is not None and doctype.owner_document is not None:
            raise WrongDocumentError("document type is already used by another document")
        if qualified_name:
            prefix, _ = split_qualified_name(qualified_name)
            check_namespace_binding(namespace_uri, prefix, qualified_name)

        document = Document(self)
        if doctype is not None:
            doctype._owner_document = document
            document.append_child(doctype)
        if qualified_name:
            document.append_child(document.create_element_ns(namespace_uri, qualified_name))
        return document
