import asyncio
import sys
import os

# Aggiungi backend/ alla PYTHONPATH per importare app.*
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "backend"))

from app.core.database import AsyncSessionLocal, engine
from app.core.security import hash_password
from app.models import Base, Store, User, UserRole

# Punti vendita del circolo, nell'ordine in cui compaiono nei riepiloghi
STORES = [
    ("clubhouse", "클럽하우스", 1),
    ("starthouse", "스타트하우스", 2),
    ("east_shade", "동그늘집", 3),
    ("west_shade", "서그늘집", 4),
]

# Utenti iniziali: cambiare le password al primo accesso
USERS = [
    ("admin", "admin", "Amministratore", UserRole.ADMIN),
    ("staff1", "staff1", "Operatore 1", UserRole.STAFF),
]


async def seed():
    async with AsyncSessionLocal() as session:
        for code, name, order in STORES:
            session.add(Store(code=code, name=name, display_order=order, is_active=True))
        for username, password, name, role in USERS:
            session.add(
                User(
                    username=username,
                    hashed_password=hash_password(password),
                    name=name,
                    role=role.value,
                    is_active=True,
                )
            )
        await session.commit()
    print(f"Creati {len(STORES)} punti vendita e {len(USERS)} utenti")


async def reset():
    print("Connessione al database, eliminazione tabelle...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        print("Tabelle eliminate. Creazione nuove tabelle...")
        await conn.run_sync(Base.metadata.create_all)
    await seed()
    await engine.dispose()
    print("Database resettato con successo!")

if __name__ == "__main__":
    asyncio.run(reset())
