from fastapi import Depends, Request
from sqlalchemy.orm import Session
from typing import Annotated
from app.core.config import Settings
from app.database.database import get_db


def get_settings(request: Request) -> Settings:
    """Configuración con la que se construyó la app."""
    return request.app.state.settings


# Sesión síncrona por request
db_dependency = Annotated[Session, Depends(get_db)]

settings_dependency = Annotated[Settings, Depends(get_settings)]
