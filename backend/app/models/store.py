from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models import Base
from app.models.mixins import ActiveFlagMixin, TimestampMixin, UUIDMixin


class Store(Base, UUIDMixin, TimestampMixin, ActiveFlagMixin):
    """
    Punto vendita del circolo (clubhouse, starthouse, ristori sul percorso).

    Dati di riferimento: vengono caricati da reset_db.py e non sono
    modificabili tramite API.
    """
    __tablename__ = "stores"

    code: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"Store(code={self.code!r}, name={self.name!r})"
