from sqlalchemy.orm import Session
from typing import Dict, Iterable, List, Optional
from models.flock import Flock


def get_flock(db: Session, flock_id: str, tenant_id: str) -> Optional[Flock]:
    return db.query(Flock).filter(Flock.id == flock_id, Flock.tenant_id == tenant_id).first()


def get_flock_current_count(db: Session, flock_id: str, tenant_id: str) -> int:
    """
    Returns the flock's bird count as of now. Raises ValueError when the flock
    does not exist for this tenant.
    """
    flock = get_flock(db, flock_id=flock_id, tenant_id=tenant_id)
    if not flock:
        raise ValueError(f"Flock with ID {flock_id} not found.")
    return flock.current_count or 0


def get_active_flocks(db: Session, tenant_id: str) -> List[Flock]:
    return db.query(Flock).filter(
        Flock.is_active,
        Flock.tenant_id == tenant_id
    ).order_by(Flock.batch_code).all()


def get_flocks_by_ids(db: Session, flock_ids: Iterable[str], tenant_id: str) -> Dict[str, Flock]:
    """Flocks keyed by id, fetched in one query. Unknown ids are left out."""
    flock_ids = list(flock_ids)
    if not flock_ids:
        return {}
    flocks = db.query(Flock).filter(Flock.id.in_(flock_ids), Flock.tenant_id == tenant_id).all()
    return {flock.id: flock for flock in flocks}
