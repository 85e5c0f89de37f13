from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import os
from dotenv import load_dotenv

load_dotenv()

# Create Bearer token security with auto_error=False
bearer_scheme = HTTPBearer(auto_error=False)

def get_api_key() -> str:
    return os.getenv("CLIENT_API_KEY", "")

def verify_api_key(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)):
    """
    Verify the admin API key sent as Bearer token
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header is required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    api_key = get_api_key()
    if not api_key or credentials.credentials != api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return credentials.credentials
