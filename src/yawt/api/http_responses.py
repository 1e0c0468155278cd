from fastapi.responses import JSONResponse


def ok_json(content: dict | None = None, status_code: int = 200) -> JSONResponse:
    body: dict[str, object] = {"ok": True}
    body.update(content or {})
    return JSONResponse(status_code=status_code, content=body)


def error_json(detail: str, status_code: int = 400, **extra: object) -> JSONResponse:
    body: dict[str, object] = {"ok": False, "detail": detail}
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body)
