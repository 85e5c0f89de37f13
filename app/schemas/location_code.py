from pydantic import BaseModel, field_validator
from typing import Any, Dict, List

class GenerateCodeRequest(BaseModel):
    caja: str

    @field_validator('caja', mode='before')
    @classmethod
    def validate_box(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise ValueError("Box must be given as text")
        if not v.strip():
            raise ValueError("Box name cannot be empty")
        return v.strip()

class GeneratedCodeResponse(BaseModel):
    success: bool = True
    codigo: str
    caja: str
    tipo: str

class BoxCodesResponse(BaseModel):
    success: bool = True
    caja: str
    codigos_existentes: List[Dict[str, Any]]
    total_codigos_ocupados: int
    proximo_codigo_sugerido: str
