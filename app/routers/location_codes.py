from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional
import logging
from app.database import get_db
from app.crud import location_code as code_crud
from app.schemas.location_code import GenerateCodeRequest, GeneratedCodeResponse, BoxCodesResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin/storage-locations/generate-code",
    tags=["storage-locations"]
)

@router.post("", response_model=GeneratedCodeResponse)
def generate_location_code(request: GenerateCodeRequest, db: Session = Depends(get_db)):
    """Propose the next free slot code for a box"""
    try:
        code, code_type = code_crud.generate_location_code(db, request.caja)
    except SQLAlchemyError:
        logger.exception("Location code generation failed for box %s", request.caja)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")
    return GeneratedCodeResponse(codigo=code, caja=request.caja, tipo=code_type)

@router.get("", response_model=BoxCodesResponse)
def get_box_codes(
    caja: Optional[str] = Query(None, description="Box to inspect"),
    db: Session = Depends(get_db)
):
    """Occupied codes of a box and the suggested next code"""
    if caja is None or not caja.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A box must be specified")
    box = caja.strip()
    try:
        codes = code_crud.get_box_codes(db, box)
        next_code, _ = code_crud.generate_location_code(db, box)
    except SQLAlchemyError:
        logger.exception("Reading codes of box %s failed", box)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")
    return BoxCodesResponse(
        caja=box,
        codigos_existentes=codes,
        total_codigos_ocupados=len(codes),
        proximo_codigo_sugerido=next_code,
    )
