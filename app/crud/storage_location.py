import logging
from collections import defaultdict
from sqlalchemy.orm import Session
from sqlalchemy import func, or_
from typing import List, Optional, Dict, Any, Tuple
from app.models.client import Client
from app.models.order import Order, ServiceStatus, DELIVERED_STATUS
from app.models.service import Service
from app.models.employee import Employee
from app.models.service_detail import ServiceDetail
from app.models.location_history import (
    LocationHistory,
    ASSIGNED_NOTE,
    REASSIGNED_NOTE,
    RELEASED_NOTE,
)
from app.schemas.storage_location import BulkLocationAssignRequest, LocationUpdateRequest
from app.exceptions import LocationConflictError, LocationNotFoundError
from app.utils.dates import utcnow, average_age_days

logger = logging.getLogger(__name__)

TOP_BOXES_LIMIT = 5

# -- query helpers --
def active_order_condition():
    """Condition matching orders that have not reached the delivered status"""
    return ServiceStatus.name != DELIVERED_STATUS

def _detail_query(db: Session):
    return db.query(ServiceDetail, Order, Client, ServiceStatus, Service)\
        .select_from(ServiceDetail)\
        .join(Order, ServiceDetail.order_id == Order.id)\
        .join(Client, Order.client_id == Client.id)\
        .join(ServiceStatus, Order.status_id == ServiceStatus.id)\
        .outerjoin(Service, ServiceDetail.service_id == Service.id)

def _active_placed_query(db: Session, *columns):
    return db.query(*columns)\
        .select_from(ServiceDetail)\
        .join(Order, ServiceDetail.order_id == Order.id)\
        .join(ServiceStatus, Order.status_id == ServiceStatus.id)\
        .filter(ServiceDetail.box_code.isnot(None), active_order_condition())

def _detail_row(detail: ServiceDetail, order: Order, client: Client, status: ServiceStatus, service: Optional[Service]) -> Dict[str, Any]:
    return {
        "detalle_servicio_id": detail.id,
        "orden_id": order.id,
        "codigo_orden": order.code,
        "servicio_nombre": service.name if service else None,
        "marca": detail.brand,
        "modelo": detail.model,
        "descripcion_calzado": detail.shoe_description,
        "cantidad": detail.quantity,
        "caja_almacenamiento": detail.box_code,
        "codigo_ubicacion": detail.slot_code,
        "notas_especiales": detail.special_notes,
        "fecha_almacenamiento": detail.stored_at,
        "empleado_almacenamiento_id": detail.stored_by_id,
        "cliente": client.full_name,
        "telefono": client.phone,
        "fecha_recepcion": order.received_at,
        "estado_orden": status.name,
    }

def _values_by_box(db: Session, column, distinct: bool = True) -> Dict[str, List[Any]]:
    query = _active_placed_query(db, ServiceDetail.box_code, column).filter(column.isnot(None))
    if distinct:
        query = query.distinct()
    grouped: Dict[str, List[Any]] = defaultdict(list)
    for box_code, value in query.order_by(ServiceDetail.box_code, column).all():
        grouped[box_code].append(value)
    return grouped

def _summarise_boxes(db: Session, with_codes: bool) -> List[Dict[str, Any]]:
    """Per-box totals of placed pairs in non-delivered orders.

    Counts and the stored-at range are grouped by the database. With
    ``with_codes`` the boxes come in box code order and carry their order
    and slot codes; without it they are ordered by pair count, busiest first.
    """
    total_pairs = func.count(ServiceDetail.id)
    query = _active_placed_query(
            db,
            ServiceDetail.box_code,
            total_pairs,
            func.count(func.distinct(ServiceDetail.order_id)),
            func.min(ServiceDetail.stored_at),
            func.max(ServiceDetail.stored_at),
        )\
        .group_by(ServiceDetail.box_code)
    if with_codes:
        query = query.order_by(ServiceDetail.box_code)
    else:
        query = query.order_by(total_pairs.desc(), ServiceDetail.box_code)

    now = utcnow()
    stored_dates = _values_by_box(db, ServiceDetail.stored_at, distinct=False)
    if with_codes:
        order_codes = _values_by_box(db, Order.code)
        slot_codes = _values_by_box(db, ServiceDetail.slot_code)

    boxes = []
    for box_code, pairs, orders, oldest, newest in query.all():
        box = {
            "caja_almacenamiento": box_code,
            "total_pares": pairs,
            "total_ordenes": orders,
        }
        if with_codes:
            box["codigos_orden"] = ", ".join(order_codes.get(box_code, []))
            box["codigos_ubicacion"] = slot_codes.get(box_code, [])
        box.update({
            "fecha_mas_antigua": oldest,
            "fecha_mas_reciente": newest,
            "dias_promedio": average_age_days(stored_dates.get(box_code, []), now),
        })
        boxes.append(box)
    return boxes

def find_slot_codes_in_use(db: Session, codes: List[str], exclude_detail_id: Optional[int] = None) -> List[Tuple[ServiceDetail, Order]]:
    """Service details of non-delivered orders currently holding any of ``codes``"""
    if not codes:
        return []
    query = db.query(ServiceDetail, Order)\
        .select_from(ServiceDetail)\
        .join(Order, ServiceDetail.order_id == Order.id)\
        .join(ServiceStatus, Order.status_id == ServiceStatus.id)\
        .filter(
            func.upper(ServiceDetail.slot_code).in_([code.upper() for code in codes]),
            active_order_condition(),
        )
    if exclude_detail_id is not None:
        query = query.filter(ServiceDetail.id != exclude_detail_id)
    return query.order_by(ServiceDetail.id).all()

def get_service_detail(db: Session, detail_id: int, order_id: int, for_update: bool = False) -> Optional[ServiceDetail]:
    query = db.query(ServiceDetail).filter(
        ServiceDetail.id == detail_id,
        ServiceDetail.order_id == order_id,
    )
    if for_update:
        query = query.with_for_update()
    return query.first()

def _require_employee(db: Session, employee_id: int) -> Employee:
    employee = db.query(Employee).filter(Employee.id == employee_id).first()
    if not employee:
        raise LocationNotFoundError(f"Employee {employee_id} not found")
    return employee

def _duplicates(codes: List[str]) -> List[str]:
    """Codes repeated in ``codes``, compared without regard to case"""
    seen = set()
    reported = set()
    duplicated = []
    for code in codes:
        key = code.upper()
        if key in seen and key not in reported:
            duplicated.append(code)
            reported.add(key)
        seen.add(key)
    return duplicated

# -- mutations --
def assign_locations(db: Session, request: BulkLocationAssignRequest) -> int:
    """Place every requested service detail in its box/slot, all or nothing.

    Checks run in order and the first failure aborts the batch: repeated slot
    codes within the request, slot codes already held by a non-delivered
    order, unknown or already placed service details, unknown employee.
    """
    try:
        codes = [loc.codigoUbicacion for loc in request.locations]
        duplicated = _duplicates(codes)
        if duplicated:
            raise LocationConflictError(f"Duplicate location codes in request: {', '.join(duplicated)}")

        in_use = find_slot_codes_in_use(db, codes)
        if in_use:
            used_codes = []
            for detail, _ in in_use:
                if detail.slot_code not in used_codes:
                    used_codes.append(detail.slot_code)
            raise LocationConflictError(f"The following codes are already in use: {', '.join(used_codes)}")

        targets = []
        seen_ids = set()
        for loc in request.locations:
            if loc.detalleServicioId in seen_ids:
                raise LocationConflictError(
                    f"Service detail {loc.detalleServicioId} appears more than once in the request"
                )
            seen_ids.add(loc.detalleServicioId)
            detail = get_service_detail(db, loc.detalleServicioId, loc.ordenId, for_update=True)
            if not detail:
                raise LocationNotFoundError(
                    f"Service detail {loc.detalleServicioId} not found for order {loc.ordenId}"
                )
            if detail.is_placed:
                raise LocationConflictError(
                    f"Service detail {loc.detalleServicioId} already has a location assigned: "
                    f"{detail.box_code} - {detail.slot_code}"
                )
            targets.append((detail, loc))

        _require_employee(db, request.empleadoId)

        now = utcnow()
        for detail, loc in targets:
            detail.box_code = loc.cajaAlmacenamiento
            detail.slot_code = loc.codigoUbicacion
            detail.special_notes = loc.notasEspeciales
            detail.stored_at = now
            detail.stored_by_id = request.empleadoId
            db.add(LocationHistory(
                service_detail_id=detail.id,
                order_id=detail.order_id,
                box_code=loc.cajaAlmacenamiento,
                slot_code=loc.codigoUbicacion,
                notes=loc.notasEspeciales or ASSIGNED_NOTE,
                employee_id=request.empleadoId,
                recorded_at=now,
            ))

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Assigned %d storage location(s) by employee %s", len(targets), request.empleadoId)
    return len(targets)

def update_location(db: Session, request: LocationUpdateRequest) -> ServiceDetail:
    """Move a service detail to a new box/slot, keeping its original stored-at"""
    try:
        detail = get_service_detail(db, request.detalleServicioId, request.ordenId, for_update=True)
        if not detail:
            raise LocationNotFoundError("Service detail not found for the given order")

        if find_slot_codes_in_use(db, [request.codigoUbicacion], exclude_detail_id=detail.id):
            raise LocationConflictError(f"Code {request.codigoUbicacion} is already in use by another service")

        _require_employee(db, request.empleadoId)

        now = utcnow()
        detail.box_code = request.cajaAlmacenamiento
        detail.slot_code = request.codigoUbicacion
        detail.special_notes = request.notasEspeciales
        if detail.stored_at is None:
            detail.stored_at = now
        detail.stored_by_id = request.empleadoId
        db.add(LocationHistory(
            service_detail_id=detail.id,
            order_id=detail.order_id,
            box_code=request.cajaAlmacenamiento,
            slot_code=request.codigoUbicacion,
            notes=request.notasEspeciales or REASSIGNED_NOTE,
            employee_id=request.empleadoId,
            recorded_at=now,
        ))

        db.commit()
        db.refresh(detail)
    except Exception:
        db.rollback()
        raise

    logger.info("Service detail %s moved to %s/%s", detail.id, detail.box_code, detail.slot_code)
    return detail

def release_location(db: Session, detail_id: int, order_id: int, employee_id: int) -> Dict[str, str]:
    """Clear the location of a placed service detail and log the release"""
    try:
        detail = get_service_detail(db, detail_id, order_id, for_update=True)
        if not detail:
            raise LocationNotFoundError("Service detail not found for the given order")
        if not detail.is_placed:
            raise LocationConflictError("The service has no location assigned")

        _require_employee(db, employee_id)

        previous = {"caja": detail.box_code, "codigo": detail.slot_code}
        detail.box_code = None
        detail.slot_code = None
        detail.special_notes = None
        detail.stored_at = None
        detail.stored_by_id = None
        db.add(LocationHistory(
            service_detail_id=detail.id,
            order_id=detail.order_id,
            box_code=previous["caja"],
            slot_code=previous["codigo"],
            notes=RELEASED_NOTE,
            employee_id=employee_id,
            recorded_at=utcnow(),
        ))

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Released location %s/%s of service detail %s", previous["caja"], previous["codigo"], detail_id)
    return previous

# -- readers --
def search_by_location(db: Session, term: str) -> List[Dict[str, Any]]:
    # % and _ in the term are matched literally
    rows = _detail_query(db).filter(
        or_(
            ServiceDetail.box_code.icontains(term, autoescape=True),
            ServiceDetail.slot_code.icontains(term, autoescape=True),
            Order.code.icontains(term, autoescape=True),
            ServiceDetail.brand.icontains(term, autoescape=True),
            ServiceDetail.model.icontains(term, autoescape=True),
        )
    ).order_by(ServiceDetail.box_code, ServiceDetail.slot_code, ServiceDetail.id).all()
    return [_detail_row(*row) for row in rows]

def get_location_map(db: Session) -> List[Dict[str, Any]]:
    return _summarise_boxes(db, with_codes=True)

def get_box_summary(db: Session) -> List[Dict[str, Any]]:
    return _summarise_boxes(db, with_codes=False)

def get_pending_services(db: Session, order_id: Optional[int] = None) -> List[Dict[str, Any]]:
    query = _detail_query(db).filter(
        ServiceDetail.box_code.is_(None),
        ServiceDetail.slot_code.is_(None),
        or_(ServiceDetail.brand.isnot(None), ServiceDetail.model.isnot(None)),
        active_order_condition(),
    )
    if order_id is not None:
        query = query.filter(ServiceDetail.order_id == order_id)
    rows = query.order_by(Order.received_at.desc(), ServiceDetail.id).all()
    return [_detail_row(*row) for row in rows]

def get_storage_statistics(db: Session) -> Dict[str, Any]:
    base = db.query(func.count(ServiceDetail.id))\
        .select_from(ServiceDetail)\
        .join(Order, ServiceDetail.order_id == Order.id)\
        .join(ServiceStatus, Order.status_id == ServiceStatus.id)\
        .filter(active_order_condition())

    total_stored = base.filter(
        ServiceDetail.box_code.isnot(None),
        ServiceDetail.slot_code.isnot(None),
    ).scalar() or 0

    pending = base.filter(
        or_(ServiceDetail.box_code.is_(None), ServiceDetail.slot_code.is_(None)),
        or_(ServiceDetail.brand.isnot(None), ServiceDetail.model.isnot(None)),
    ).scalar() or 0

    stored_dates = db.query(ServiceDetail.stored_at)\
        .join(Order, ServiceDetail.order_id == Order.id)\
        .join(ServiceStatus, Order.status_id == ServiceStatus.id)\
        .filter(ServiceDetail.stored_at.isnot(None), active_order_condition())\
        .all()
    average = average_age_days(d for (d,) in stored_dates)

    top_boxes = [
        {"caja_almacenamiento": box["caja_almacenamiento"], "total_pares": box["total_pares"]}
        for box in get_box_summary(db)[:TOP_BOXES_LIMIT]
    ]

    return {
        "totalAlmacenados": int(total_stored),
        "pendientesUbicacion": int(pending),
        "tiempoPromedioAlmacenamiento": int(round(average or 0)),
        "cajasMasUtilizadas": top_boxes,
    }

def get_location_history(db: Session, detail_id: int) -> List[Dict[str, Any]]:
    rows = db.query(LocationHistory, Employee, Order)\
        .select_from(LocationHistory)\
        .join(Employee, LocationHistory.employee_id == Employee.id)\
        .join(Order, LocationHistory.order_id == Order.id)\
        .filter(LocationHistory.service_detail_id == detail_id)\
        .order_by(LocationHistory.recorded_at.desc(), LocationHistory.id.desc())\
        .all()
    return [
        {
            "historial_id": entry.id,
            "detalle_servicio_id": entry.service_detail_id,
            "orden_id": entry.order_id,
            "caja_almacenamiento": entry.box_code,
            "codigo_ubicacion": entry.slot_code,
            "notas": entry.notes,
            "empleado_id": entry.employee_id,
            "fecha_asignacion": entry.recorded_at,
            "empleado_nombre": employee.full_name,
            "codigo_orden": order.code,
        }
        for entry, employee, order in rows
    ]

def find_slot_code_usage(db: Session, code: str) -> Optional[Dict[str, Any]]:
    """Who holds ``code`` among non-delivered orders, or None when it is free"""
    in_use = find_slot_codes_in_use(db, [code])
    if not in_use:
        return None
    detail, order = in_use[0]
    return {"detalle_servicio_id": detail.id, "codigo_orden": order.code}
