import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse

from .errors import EssayValidationError
from .settings import settings
from .routers import health
from .routers import analyze
from .routers import prompts

logging.basicConfig(
	level=getattr(logging, settings.log_level.upper(), logging.INFO),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="IELTS Writing Feedback API")
app.include_router(health.router)
app.include_router(analyze.router)
app.include_router(prompts.router)


@app.exception_handler(EssayValidationError)
async def essay_validation_error_handler(request: Request, exc: EssayValidationError):
	return JSONResponse(status_code=400, content={"error": str(exc)})


@app.get("/", include_in_schema=False)
async def redirect_root_to_docs():
	return RedirectResponse(url="/docs")


@app.get("/info")
def root():
	return {
		"status": "ok",
		"llm_configured": settings.llm_configured,
		"model": settings.gemini_model,
	}
