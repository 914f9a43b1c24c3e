from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from fastapi import Request
import logging

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """
    Conexión compartida a la base de datos.

    Se construye una sola vez en el punto de entrada del proceso (create_app)
    y se inyecta en los servicios a través de las sesiones que entrega.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url

        if url.startswith("sqlite"):
            engine_kwargs = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in url or url.rstrip("/") == "sqlite:":
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs = {
                "pool_pre_ping": True,
                "pool_size": 10,
                "max_overflow": 20,
            }

        self.engine = create_engine(url, echo=echo, **engine_kwargs)

        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False
        )

    def create_all(self) -> None:
        """Crear tablas (solo desarrollo y tests)."""
        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request):
    """Genera una sesión de base de datos por request a partir de la conexión de la app."""
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    except SQLAlchemyError as e:
        logger.error(f"Database error: {e}")
        db.rollback()
        raise
    finally:
        db.close()
