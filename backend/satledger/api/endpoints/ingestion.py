from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from satledger.db.session import get_db
from satledger.core.errors import CatalogError
from satledger.services.ingestion import scrape_and_ingest
from typing import Any

router = APIRouter()


@router.post("/sync")
def ingest_sync(db: Session = Depends(get_db)) -> Any:
    """
    Scrape CelesTrak and ingest every supplemental TLE file synchronously.
    Unchanged files are skipped; a failing source does not stop the others.
    """
    try:
        results = scrape_and_ingest(db)
    except CatalogError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"message": "Ingestion complete", "results": [r.to_dict() for r in results]}
