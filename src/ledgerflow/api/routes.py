"""HTTP routes for import, posting and reset."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from pydantic import BaseModel

from ledgerflow.api.serializers import import_result_to_json
from ledgerflow.services import Services

router = APIRouter(prefix="/api", tags=["ledger"])


class PostTransactionsRequest(BaseModel):
    transactionIds: Optional[list[str]] = None


def get_services(request: Request) -> Services:
    return request.app.state.services


@router.get("/health")
def health(services: Services = Depends(get_services)):
    return {"status": "ok", "trainingDataCount": len(services.corpus)}


@router.post("/import-csv")
def import_csv(
    file: Optional[UploadFile] = File(None),
    sourceAccountId: Optional[str] = Form(None),
    sourceType: Optional[str] = Form(None),
    sourceName: Optional[str] = Form(None),
    offset: int = Form(0),
    services: Services = Depends(get_services),
):
    csv_data = file.file.read() if file is not None else b""
    result = services.import_service.import_csv(
        csv_data,
        source_type=sourceType or "",
        source_account_id=sourceAccountId or None,
        source_name=sourceName or None,
        offset=offset,
    )
    return import_result_to_json(result, training_data_count=len(services.corpus))


@router.post("/post-transactions")
def post_transactions(
    body: Optional[PostTransactionsRequest] = None,
    services: Services = Depends(get_services),
):
    transaction_ids = (body.transactionIds if body is not None else None) or []
    count = services.posting_service.post_transactions(transaction_ids)
    return {"success": True, "count": count}


@router.post("/reset-db")
def reset_db(services: Services = Depends(get_services)):
    services.maintenance_service.reset_ledger()
    return {"success": True, "message": "Database reset successfully"}
