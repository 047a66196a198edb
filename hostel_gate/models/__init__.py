# Hostel Gate — Database Models
# Import all models here for SQLAlchemy discovery

from hostel_gate.models.document import Document     # noqa
