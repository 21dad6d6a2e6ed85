from enum import Enum


class WriteOperation(Enum):
    """
    Bulk action emitted for every outgoing document.
    """

    Index = "index"  # Create or replace.
    Create = "create"  # Create only; fails if the id exists.
    Update = "update"  # Partial update of an existing document.
    Upsert = "upsert"  # Partial update, creating the document when missing.
    Delete = "delete"  # Remove the document with the given id.

    @property
    def requires_id(self) -> bool:
        return self in (WriteOperation.Update, WriteOperation.Upsert, WriteOperation.Delete)
