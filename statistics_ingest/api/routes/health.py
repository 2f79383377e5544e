from fastapi import APIRouter
from fastapi.responses import RedirectResponse

router = APIRouter(tags=["health"])

@router.get("/", include_in_schema=False)
def index():
    return RedirectResponse(url="/docs", status_code=302)

@router.get("/health")
def health():
    return {"status": "ok"}
