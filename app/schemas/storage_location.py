from pydantic import BaseModel, field_validator, model_validator
import enum
from typing import Any, Dict, List, Optional
from app.validators import (
    int_id_validator,
    non_empty_string_preserve_case_validator,
    optional_string_validator,
)

REQUIRED_LOCATION_FIELDS = ("detalleServicioId", "ordenId", "cajaAlmacenamiento", "codigoUbicacion")


def _missing_fields(data: Dict[str, Any], fields) -> List[str]:
    missing = []
    for f in fields:
        value = data.get(f)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(f)
    return missing


def _code_text(v: Any, field_name: str) -> str:
    # codes typed as bare numbers in the UI arrive as JSON numbers
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        v = str(v)
    return non_empty_string_preserve_case_validator(field_name)(v)


class LocationFields(BaseModel):
    detalleServicioId: int
    ordenId: int
    cajaAlmacenamiento: str
    codigoUbicacion: str
    notasEspeciales: Optional[str] = None

    @field_validator('detalleServicioId', mode='before')
    @classmethod
    def validate_detail_id(cls, v: Any) -> int:
        return int_id_validator('detalleServicioId')(v)

    @field_validator('ordenId', mode='before')
    @classmethod
    def validate_order_id(cls, v: Any) -> int:
        return int_id_validator('ordenId')(v)

    @field_validator('cajaAlmacenamiento', mode='before')
    @classmethod
    def validate_box(cls, v: Any) -> str:
        return _code_text(v, 'cajaAlmacenamiento')

    @field_validator('codigoUbicacion', mode='before')
    @classmethod
    def validate_slot(cls, v: Any) -> str:
        return _code_text(v, 'codigoUbicacion')

    @field_validator('notasEspeciales', mode='before')
    @classmethod
    def validate_notes(cls, v: Any) -> Optional[str]:
        return optional_string_validator('notasEspeciales')(v)


class LocationAssignment(LocationFields):
    @model_validator(mode='before')
    @classmethod
    def require_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict) or _missing_fields(data, REQUIRED_LOCATION_FIELDS):
            raise ValueError("All required fields must be present in each location")
        return data


class BulkLocationAssignRequest(BaseModel):
    locations: List[LocationAssignment]
    empleadoId: int

    @model_validator(mode='before')
    @classmethod
    def require_locations_and_employee(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ValueError("Request body must be a JSON object")
        locations = data.get("locations")
        if not isinstance(locations, list) or len(locations) == 0:
            raise ValueError("A non-empty list of locations is required")
        if _missing_fields(data, ("empleadoId",)):
            raise ValueError("Employee ID is required")
        return data

    @field_validator('empleadoId', mode='before')
    @classmethod
    def validate_employee_id(cls, v: Any) -> int:
        return int_id_validator('empleadoId')(v)


class LocationUpdateRequest(LocationFields):
    empleadoId: int

    @model_validator(mode='before')
    @classmethod
    def require_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict) or _missing_fields(data, REQUIRED_LOCATION_FIELDS + ("empleadoId",)):
            raise ValueError("All required fields must be present")
        return data

    @field_validator('empleadoId', mode='before')
    @classmethod
    def validate_employee_id(cls, v: Any) -> int:
        return int_id_validator('empleadoId')(v)


class LocationRef(BaseModel):
    caja: str
    codigo: str


class AssignLocationsResponse(BaseModel):
    success: bool = True
    message: str
    ubicacionesAsignadas: int


class UpdateLocationResponse(BaseModel):
    success: bool = True
    message: str
    detalleServicioId: int
    nuevaUbicacion: LocationRef


class ReleaseLocationResponse(BaseModel):
    success: bool = True
    message: str
    ubicacionLiberada: LocationRef


class SearchResponse(BaseModel):
    success: bool = True
    resultados: List[Dict[str, Any]]
    total: int
    termino_busqueda: str


class MapResponse(BaseModel):
    success: bool = True
    mapa: List[Dict[str, Any]]
    total_ubicaciones: int


class PendingResponse(BaseModel):
    success: bool = True
    servicios: List[Dict[str, Any]]
    total: int
    orden_filtrada: Optional[int] = None


class StorageStatistics(BaseModel):
    totalAlmacenados: int
    pendientesUbicacion: int
    tiempoPromedioAlmacenamiento: int
    cajasMasUtilizadas: List[Dict[str, Any]]


class StatsResponse(BaseModel):
    success: bool = True
    estadisticas: StorageStatistics
    fecha_consulta: str


class HistoryResponse(BaseModel):
    success: bool = True
    historial: List[Dict[str, Any]]
    detalle_servicio_id: int


class CodeUsage(BaseModel):
    detalle_servicio_id: int
    codigo_orden: str


class ValidateCodeResponse(BaseModel):
    success: bool = True
    disponible: bool
    codigo: str
    en_uso_por: Optional[CodeUsage] = None
    formato_valido: bool = True


class BoxesResponse(BaseModel):
    success: bool = True
    cajas: List[Dict[str, Any]]
    total_cajas_ocupadas: int


class LocationAction(str, enum.Enum):
    """Read operations available through ``GET ?action=``"""
    SEARCH = "search"
    MAP = "map"
    PENDING = "pending"
    STATS = "stats"
    HISTORY = "history"
    VALIDATE_CODE = "validate-code"
    BOXES = "boxes"
