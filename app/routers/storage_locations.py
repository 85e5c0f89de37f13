from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Callable, Dict, Optional
import logging
from app.database import get_db
from app.crud import storage_location as location_crud
from app.crud.location_code import is_valid_location_code
from app.exceptions import StorageLocationError, LocationValidationError
from app.validators import parse_int_id
from app.utils.dates import utcnow
from app.schemas.storage_location import (
    LocationAction,
    BulkLocationAssignRequest,
    LocationUpdateRequest,
    LocationRef,
    AssignLocationsResponse,
    UpdateLocationResponse,
    ReleaseLocationResponse,
    SearchResponse,
    MapResponse,
    PendingResponse,
    StorageStatistics,
    StatsResponse,
    HistoryResponse,
    CodeUsage,
    ValidateCodeResponse,
    BoxesResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin/storage-locations",
    tags=["storage-locations"]
)

INTERNAL_ERROR = "Internal server error"

def _query_int(value: Optional[str], field_name: str, message: Optional[str] = None) -> int:
    try:
        return parse_int_id(value, field_name)
    except ValueError as e:
        raise LocationValidationError(message or str(e))

def _run(operation: str, func: Callable, *args):
    """Call a CRUD operation, converting its errors to HTTP responses"""
    try:
        return func(*args)
    except StorageLocationError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except SQLAlchemyError:
        logger.exception("%s failed", operation)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_ERROR)

# ------------------ GET actions ------------------ #

def _search(db: Session, params: Dict[str, Optional[str]]) -> SearchResponse:
    term = (params.get("q") or "").strip()
    if not term:
        raise LocationValidationError("A search term is required")
    results = location_crud.search_by_location(db, term)
    return SearchResponse(resultados=results, total=len(results), termino_busqueda=term)

def _map(db: Session, params: Dict[str, Optional[str]]) -> MapResponse:
    location_map = location_crud.get_location_map(db)
    return MapResponse(mapa=location_map, total_ubicaciones=len(location_map))

def _pending(db: Session, params: Dict[str, Optional[str]]) -> PendingResponse:
    raw_order_id = params.get("ordenId")
    order_id = None
    if raw_order_id is not None and raw_order_id.strip():
        order_id = _query_int(raw_order_id, "ordenId", "Invalid order ID")
    services = location_crud.get_pending_services(db, order_id)
    return PendingResponse(servicios=services, total=len(services), orden_filtrada=order_id)

def _stats(db: Session, params: Dict[str, Optional[str]]) -> StatsResponse:
    statistics = location_crud.get_storage_statistics(db)
    return StatsResponse(
        estadisticas=StorageStatistics(**statistics),
        fecha_consulta=utcnow().isoformat() + "Z",
    )

def _history(db: Session, params: Dict[str, Optional[str]]) -> HistoryResponse:
    raw_detail_id = params.get("detalleServicioId")
    if raw_detail_id is None or not raw_detail_id.strip():
        raise LocationValidationError("Service detail ID is required")
    detail_id = _query_int(raw_detail_id, "detalleServicioId")
    history = location_crud.get_location_history(db, detail_id)
    return HistoryResponse(historial=history, detalle_servicio_id=detail_id)

def _validate_code(db: Session, params: Dict[str, Optional[str]]) -> ValidateCodeResponse:
    code = (params.get("codigo") or "").strip()
    if not code:
        raise LocationValidationError("A code to validate is required")
    usage = location_crud.find_slot_code_usage(db, code)
    return ValidateCodeResponse(
        disponible=usage is None,
        codigo=code,
        en_uso_por=CodeUsage(**usage) if usage else None,
        formato_valido=is_valid_location_code(code),
    )

def _boxes(db: Session, params: Dict[str, Optional[str]]) -> BoxesResponse:
    boxes = location_crud.get_box_summary(db)
    return BoxesResponse(cajas=boxes, total_cajas_ocupadas=len(boxes))

_ACTION_HANDLERS: Dict[LocationAction, Callable] = {
    LocationAction.SEARCH: _search,
    LocationAction.MAP: _map,
    LocationAction.PENDING: _pending,
    LocationAction.STATS: _stats,
    LocationAction.HISTORY: _history,
    LocationAction.VALIDATE_CODE: _validate_code,
    LocationAction.BOXES: _boxes,
}

@router.get("", response_model=None)
def get_storage_locations(
    action: Optional[str] = Query(None, description="One of: " + ", ".join(a.value for a in LocationAction)),
    q: Optional[str] = Query(None, description="Search term for action=search"),
    ordenId: Optional[str] = Query(None, description="Order filter for action=pending"),
    detalleServicioId: Optional[str] = Query(None, description="Service detail for action=history"),
    codigo: Optional[str] = Query(None, description="Slot code for action=validate-code"),
    db: Session = Depends(get_db)
):
    """Read-only storage location queries, selected by ``action``"""
    try:
        selected = LocationAction(action)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid action. Available actions: " + ", ".join(a.value for a in LocationAction)
        )

    params = {
        "q": q,
        "ordenId": ordenId,
        "detalleServicioId": detalleServicioId,
        "codigo": codigo,
    }
    return _run(f"GET action={selected.value}", _ACTION_HANDLERS[selected], db, params)

# ------------------ Mutations ------------------ #

@router.post("", response_model=AssignLocationsResponse)
def assign_storage_locations(request: BulkLocationAssignRequest, db: Session = Depends(get_db)):
    """Assign storage locations to one or more service details"""
    assigned = _run("Assign storage locations", location_crud.assign_locations, db, request)
    plural = "s" if assigned > 1 else ""
    return AssignLocationsResponse(
        message=f"{assigned} location{plural} assigned successfully",
        ubicacionesAsignadas=assigned,
    )

@router.put("", response_model=UpdateLocationResponse)
def update_storage_location(request: LocationUpdateRequest, db: Session = Depends(get_db)):
    """Move a service detail to a new box/slot"""
    detail = _run("Update storage location", location_crud.update_location, db, request)
    return UpdateLocationResponse(
        message="Location updated successfully",
        detalleServicioId=detail.id,
        nuevaUbicacion=LocationRef(caja=detail.box_code, codigo=detail.slot_code),
    )

@router.delete("", response_model=ReleaseLocationResponse)
def release_storage_location(
    detalleServicioId: Optional[str] = Query(None),
    ordenId: Optional[str] = Query(None),
    empleadoId: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """Release the location held by a service detail"""
    if not all(v is not None and v.strip() for v in (detalleServicioId, ordenId, empleadoId)):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="detalleServicioId, ordenId and empleadoId are required"
        )
    try:
        detail_id = parse_int_id(detalleServicioId, "detalleServicioId")
        order_id = parse_int_id(ordenId, "ordenId")
        employee_id = parse_int_id(empleadoId, "empleadoId")
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="IDs must be valid numbers"
        )

    previous = _run("Release storage location", location_crud.release_location, db, detail_id, order_id, employee_id)
    return ReleaseLocationResponse(
        message="Location released successfully",
        ubicacionLiberada=LocationRef(**previous),
    )
