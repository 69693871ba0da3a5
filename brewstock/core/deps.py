from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from brewstock.db.session import SessionLocal
from brewstock.services.inventory_store import InventoryStore


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_store(db: Session = Depends(get_db)) -> InventoryStore:
    return InventoryStore(db)
