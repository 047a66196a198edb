# hostel_gate/models/document.py
"""
Generic document table.
Every student record and every global log event is one row, addressed by
(collection, key), with its fields stored in a JSON column.
"""

from sqlalchemy import Column, String, DateTime, JSON
from hostel_gate.database import Base


class Document(Base):
    __tablename__ = "documents"

    collection = Column(String(100), primary_key=True)
    key = Column(String(200), primary_key=True)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<Document {self.collection}/{self.key}>"
