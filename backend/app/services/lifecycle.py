"""
Ciclo di vita degli incassi giornalieri
Progetto: Northpalm CC (Incassi Giornalieri)

Stati: OPEN -> CLOSED -> OPEN (la riapertura torna ad OPEN).

- close:  qualsiasi utente autenticato; fallisce se l'incasso è già chiuso.
- reopen: solo admin, con motivo obbligatorio; fallisce se l'incasso è aperto.
- modifica ed eliminazione: consentite solo in stato OPEN.

Le funzioni di questo modulo non toccano il database: applicano la
transizione all'oggetto SalesRecord e restituiscono la voce di storico da
aggiungere alla sessione. Il chiamante è responsabile di aver caricato il
record con un lock di riga (vedi SalesService).
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from app.core.exceptions import AuthorizationError, BusinessValidationError, ConflictError
from app.models.sales import ClosingAction, ClosingHistory, RecordState, SalesRecord
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)

__all__ = [
    "ensure_admin",
    "ensure_open",
    "close_record",
    "validate_reopen_request",
    "reopen_record",
    "apply_reopen",
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_admin(user: User, action: str = "eseguire questa operazione") -> None:
    """
    Verifica che l'utente abbia il ruolo admin.

    Raises:
        AuthorizationError: se l'utente non è admin
    """
    if user.role != UserRole.ADMIN.value:
        raise AuthorizationError(
            f"Solo gli amministratori possono {action}",
            error_code="ADMIN_REQUIRED",
        )


def ensure_open(record: SalesRecord, action: str = "modificato") -> None:
    """
    Verifica che l'incasso sia aperto prima di una modifica o cancellazione.

    Args:
        record: Incasso da verificare
        action: Participio usato nel messaggio ("modificato", "eliminato")

    Raises:
        AuthorizationError: se l'incasso è chiuso
    """
    if record.state is RecordState.CLOSED:
        raise AuthorizationError(
            f"Un incasso chiuso non può essere {action}",
            error_code="SALES_RECORD_CLOSED",
        )


def close_record(
    record: SalesRecord, user: User, now: Optional[datetime] = None
) -> ClosingHistory:
    """
    Chiude un incasso aperto.

    Args:
        record: Incasso da chiudere
        user: Utente che esegue la chiusura
        now: Istante della chiusura (default: adesso, UTC)

    Returns:
        La voce di storico con action=close

    Raises:
        ConflictError: se l'incasso è già chiuso
    """
    if record.state is RecordState.CLOSED:
        raise ConflictError(
            "L'incasso è già chiuso",
            error_code="SALES_RECORD_ALREADY_CLOSED",
        )

    when = now or _utcnow()
    record.is_closed = True
    record.closed_at = when
    record.closed_by_id = user.id
    record.closed_by = user

    logger.info("Incasso %s chiuso da %s", record.id, user.username)

    return ClosingHistory(
        sales_record_id=record.id,
        action=ClosingAction.CLOSE.value,
        performed_by_id=user.id,
        performed_at=when,
        reason=None,
    )


def validate_reopen_request(user: User, reason: Optional[str]) -> str:
    """
    Controlli della riapertura indipendenti dallo stato del record.

    Returns:
        Il motivo ripulito dagli spazi

    Raises:
        AuthorizationError: se l'utente non è admin
        BusinessValidationError: se il motivo manca o è vuoto
    """
    ensure_admin(user, "riaprire un incasso chiuso")

    cleaned_reason = (reason or "").strip()
    if not cleaned_reason:
        raise BusinessValidationError(
            "Il motivo della riapertura è obbligatorio",
            error_code="REOPEN_REASON_REQUIRED",
        )
    return cleaned_reason


def reopen_record(
    record: SalesRecord,
    user: User,
    reason: Optional[str],
    now: Optional[datetime] = None,
) -> ClosingHistory:
    """
    Riapre un incasso chiuso.

    L'ordine dei controlli è: ruolo, motivo, stato. Una richiesta priva
    di motivo o proveniente da un utente non admin fallisce sempre, a
    prescindere dallo stato del record.

    Args:
        record: Incasso da riaprire
        user: Utente che esegue la riapertura (deve essere admin)
        reason: Motivo della riapertura (obbligatorio, non vuoto)
        now: Istante della riapertura (default: adesso, UTC)

    Returns:
        La voce di storico con action=reopen e il motivo

    Raises:
        AuthorizationError: se l'utente non è admin
        BusinessValidationError: se il motivo manca o è vuoto
        ConflictError: se l'incasso non è chiuso
    """
    cleaned_reason = validate_reopen_request(user, reason)
    return apply_reopen(record, user, cleaned_reason, now)


def apply_reopen(
    record: SalesRecord,
    user: User,
    cleaned_reason: str,
    now: Optional[datetime] = None,
) -> ClosingHistory:
    """
    Transizione CLOSED -> OPEN per una richiesta già validata.

    Da usare solo dopo validate_reopen_request, che ha già controllato
    ruolo e motivo.

    Raises:
        ConflictError: se l'incasso non è chiuso
    """
    if record.state is RecordState.OPEN:
        raise ConflictError(
            "L'incasso non è chiuso",
            error_code="SALES_RECORD_NOT_CLOSED",
        )

    record.is_closed = False
    record.closed_at = None
    record.closed_by_id = None
    record.closed_by = None

    logger.info(
        "Incasso %s riaperto da %s (motivo: %s)", record.id, user.username, cleaned_reason
    )

    return ClosingHistory(
        sales_record_id=record.id,
        action=ClosingAction.REOPEN.value,
        performed_by_id=user.id,
        performed_at=now or _utcnow(),
        reason=cleaned_reason,
    )
