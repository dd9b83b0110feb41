from fastapi.responses import JSONResponse
from typing import Any

def success(data: Any = None, message: str = "ok", status_code: int = 200):
    return JSONResponse(status_code=status_code, content={"ok": True, "message": message, "data": data})

def rejected(message: str, status_code: int = 403):
    # Rejections carry no CORS headers so the browser blocks the response too
    return JSONResponse(status_code=status_code, content={"ok": False, "error": message})
