"""
Document store seam used by the revision orchestrator.

The orchestrator only ever reads the live resume and replaces it wholesale;
any editor state container can plug in by offering ``read`` and ``replace``.
"""
from typing import Optional, Protocol

from ..schemas.resume import ResumeDocument, initial_resume


class DocumentStore(Protocol):
    def read(self) -> ResumeDocument:
        ...

    def replace(self, document: ResumeDocument) -> None:
        ...


class InMemoryDocumentStore:
    """Holds a single resume in memory. Starts from the blank editor document."""

    def __init__(self, document: Optional[ResumeDocument] = None):
        self._document = document if document is not None else initial_resume()

    def read(self) -> ResumeDocument:
        return self._document

    def replace(self, document: ResumeDocument) -> None:
        self._document = document
