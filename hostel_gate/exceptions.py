# hostel_gate/exceptions.py
"""Error types raised by the document store layer."""


class StoreError(Exception):
    """Any transport/service failure talking to the document store."""


class DocumentNotFoundError(StoreError):
    """Raised when a field update targets a document that does not exist."""

    def __init__(self, collection: str, key: str):
        super().__init__(f"{collection}/{key} does not exist")
        self.collection = collection
        self.key = key
