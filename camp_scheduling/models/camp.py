# camp_scheduling/models/camp.py
import uuid

from sqlalchemy import Column, String, DateTime, func

from camp_scheduling.db.base_class import Base


class Camp(Base):
    """
    Local projection of a camp owned by the organization service.

    Only what the scheduling core needs to resolve a camp and authorize
    staff of its organization.
    """
    __tablename__ = "camps"

    id = Column(String, primary_key=True, default=lambda: f"camp_{uuid.uuid4().hex[:12]}")
    organization_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
