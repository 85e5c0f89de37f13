from typing import Any, Optional

def non_empty_string_preserve_case_validator(field_name: str = "Value"):
    def validator(v: Optional[str]) -> str:
        if v is None or not isinstance(v, str) or len(v.strip()) == 0:
            raise ValueError(f'{field_name} cannot be empty')
        return v.strip()
    return validator

def optional_string_validator(field_name: str = "Value"):
    """Trim the value and turn blank strings into None"""
    def validator(v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError(f'{field_name} must be text')
        v = v.strip()
        return v or None
    return validator

def parse_int_id(v: Any, field_name: str = "ID") -> int:
    """Parse an identifier that may arrive as a number or a numeric string"""
    if isinstance(v, bool):
        raise ValueError(f'{field_name} must be a valid number')
    if isinstance(v, int):
        return v
    if isinstance(v, float) and v.is_integer():
        return int(v)
    if isinstance(v, str):
        try:
            return int(v.strip())
        except ValueError:
            pass
    raise ValueError(f'{field_name} must be a valid number')

def int_id_validator(field_name: str = "ID"):
    def validator(v: Any) -> int:
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError(f'{field_name} is required')
        return parse_int_id(v, field_name)
    return validator
