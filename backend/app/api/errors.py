from contextlib import contextmanager

from fastapi import HTTPException


@contextmanager
def domain_errors():
    """Translates domain exceptions raised inside the block into HTTP errors."""
    try:
        yield
    except PermissionError as exc:
        raise HTTPException(status_code=403, detail=str(exc) or "Forbidden")
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc).strip("'\"") or "Not Found")
    except FileExistsError as exc:
        raise HTTPException(status_code=409, detail=str(exc) or "Conflict")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc) or "Bad Request")
