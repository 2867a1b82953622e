from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/healthz")
async def healthz(request: Request) -> dict[str, str]:
    app_settings = getattr(request.app.state, "app_settings", None)
    name = getattr(app_settings, "app_name", "charterdesk-pricing")
    return {"status": "ok", "service": name}
