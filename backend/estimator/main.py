# backend/estimator/main.py
from dotenv import load_dotenv

load_dotenv()  # Loads .env automatically

from typing import Optional

from fastapi import Depends, FastAPI, Form, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .errors import EstimatorError
from .estimator import DEFAULT_SERVICE, Estimator, select_image_uploads
from .logging_config import get_metrics_snapshot, inc_metric, log
from .models import EstimateResponse, ErrorResponse
from .pricing import rate_card


app = FastAPI(title="Exterior Cleaning AI Estimator", version="1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_estimator(settings: Settings = Depends(get_settings)) -> Estimator:
    return Estimator(settings)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed requests get the same ``{"error": ...}`` body as every other failure."""
    errors = exc.errors()
    message = errors[0].get("msg") if errors else None
    log.error(f"❌ Invalid request to {request.url.path}: {message}")
    inc_metric("estimate_errors")
    return _error(400, message or "Invalid request")


# ==========================================================
#                      ESTIMATE PIPELINE
# ==========================================================


@app.post(
    "/api/estimate",
    response_model=EstimateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def estimate(
    request: Request,
    service: Optional[str] = Form(DEFAULT_SERVICE),
    estimator: Estimator = Depends(get_estimator),
):
    """
    Price an exterior cleaning job from one or more property photos.

    ``images`` is read from the form directly: empty file inputs and text
    fields under that name are ignored rather than rejected.

    The AI estimate falls back to the Smart Estimator when the model call
    fails, so a quote is returned whenever photos and an API key are present.
    """
    try:
        form = await request.form()
        images = select_image_uploads(form.getlist("images"))
        log.info(f"🚀 Estimate request (service={service}, images={len(images)})")
        return await estimator.estimate(service, images)
    except EstimatorError as e:
        log.error(f"❌ Estimate rejected: {e.message}")
        inc_metric("estimate_errors")
        return _error(e.status_code, e.message)
    except Exception as e:
        log.exception(f"💥 Estimate pipeline error: {e}")
        inc_metric("estimate_errors")
        return _error(500, str(e) or "Unexpected error")


@app.get("/api/rates")
async def rates():
    return rate_card()


# ==========================================================
#                     METRICS + HEALTH
# ==========================================================


@app.get("/metrics")
async def metrics():
    return get_metrics_snapshot()


@app.get("/health")
async def health(settings: Settings = Depends(get_settings)):
    return {"status": "ok", "inference_configured": settings.inference_configured}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("backend.estimator.main:app", host="127.0.0.1", port=8000, reload=True)
