# camp_scheduling/crud/crud_camp.py
from typing import Optional

from sqlalchemy.orm import Session

from camp_scheduling.core.exceptions import NotFoundError
from camp_scheduling.models.camp import Camp


class CRUDCamp:
    """Lookups against the local camp projection."""

    def get(self, db: Session, id: str):
        return db.query(Camp).filter(Camp.id == id).first()

    def get_or_404(self, db: Session, id: str) -> Camp:
        camp = self.get(db, id)
        if not camp:
            raise NotFoundError("Camp", id)
        return camp

    def create(self, db: Session, *, organization_id: str, name: str, id: Optional[str] = None) -> Camp:
        camp = Camp(organization_id=organization_id, name=name)
        if id:
            camp.id = id
        db.add(camp)
        db.commit()
        db.refresh(camp)
        return camp


camp = CRUDCamp()
