"""
Busta di risposta comune a tutte le API.
Progetto: Northpalm CC (Incassi Giornalieri)

Ogni risposta, di successo o di errore, ha la forma
{success, data?, error?, message?}.
"""

from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """
    Busta standard delle risposte.

    Attributes:
        success: True se l'operazione è andata a buon fine
        data: Payload della risposta (assente in caso di errore)
        error: Messaggio di errore (solo in caso di errore)
        message: Messaggio leggibile per l'utente
        error_code: Codice errore stabile per il frontend
    """

    success: bool = Field(..., description="Esito dell'operazione")
    data: Optional[T] = Field(None, description="Payload della risposta")
    error: Optional[str] = Field(None, description="Messaggio di errore")
    message: Optional[str] = Field(None, description="Messaggio per l'utente")
    error_code: Optional[str] = Field(None, description="Codice errore")


def success_response(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """Costruisce la busta di successo."""
    return {"success": True, "data": data, "message": message}


def error_response(
    error: str,
    message: Optional[str] = None,
    error_code: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Costruisce la busta di errore; message ricade su error se assente."""
    body: Dict[str, Any] = {
        "success": False,
        "error": error,
        "message": message or error,
    }
    if error_code:
        body["error_code"] = error_code
    if extra:
        body["data"] = extra
    return body


__all__ = ["ApiResponse", "success_response", "error_response"]
