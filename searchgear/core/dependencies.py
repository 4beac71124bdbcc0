from typing import Annotated, Any, Dict

from fastapi import Depends, Request


def get_request_context(request: Request) -> Dict[str, Any]:
    """Origine de la requête, enregistrée dans les métadonnées d'audit."""
    return {
        "ipAddress": request.client.host if request.client else None,
        "userAgent": request.headers.get("user-agent"),
    }


RequestContextDep = Annotated[Dict[str, Any], Depends(get_request_context)]
