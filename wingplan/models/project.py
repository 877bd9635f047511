import uuid
from datetime import datetime
from sqlalchemy import JSON, Boolean, Column, DateTime, String, Uuid
from sqlalchemy.dialects.postgresql import JSONB

from wingplan.lib.database import Base


class ProjectRecord(Base):
    __tablename__ = "projects"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    by = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    status = Column(String(50), nullable=False, default="planning")
    commercial_unit_placement = Column(String(20), nullable=False, default="projectLevel")
    # Validated camelCase payload of the whole tree
    structure = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
