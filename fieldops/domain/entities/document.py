"""Document entity — a file in the document library."""

from dataclasses import dataclass
from datetime import datetime

from fieldops.domain.value_objects.enums import DocumentTarget, DocumentType


@dataclass
class Document:
    id: int | None
    name: str
    type: DocumentType
    url: str
    version: str | None = None
    uploaded_at: datetime | None = None
    module_id: int | None = None
    module_type_id: int | None = None
    client_id: int | None = None

    # Read-side enrichment
    module_serial: str | None = None
    client_name: str | None = None

    def attach_to(self, target: DocumentTarget, target_id: int) -> None:
        if target == DocumentTarget.MODULE:
            self.module_id = target_id
        elif target == DocumentTarget.MODULE_TYPE:
            self.module_type_id = target_id
        else:
            self.client_id = target_id

    @property
    def target(self) -> DocumentTarget | None:
        if self.module_id is not None:
            return DocumentTarget.MODULE
        if self.module_type_id is not None:
            return DocumentTarget.MODULE_TYPE
        if self.client_id is not None:
            return DocumentTarget.CLIENT
        return None
