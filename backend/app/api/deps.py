from typing import Annotated

from fastapi import Depends, Request

from app.core.db import Database


def get_database(request: Request) -> Database:
    """Shared data handle built by the application lifespan."""
    return request.app.state.database


DatabaseDep = Annotated[Database, Depends(get_database)]
