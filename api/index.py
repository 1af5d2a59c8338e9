from functools import lru_cache
import logging
import os
from pathlib import Path
import re
import sys

from fastapi import FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

# Ensure local src package is importable in serverless runtime.
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from mind_note.config import RefinerSettings  # noqa: E402
from mind_note.core import MemoRefiner, build_refiner  # noqa: E402
from mind_note.exceptions import AuthenticationError, InvalidInputError, TaxonomyError  # noqa: E402
from mind_note.schema import SUPPORTED_LANGUAGES  # noqa: E402
from mind_note.taxonomy import load_taxonomy  # noqa: E402

app = FastAPI(title="mind-note API", version="1.0.0")
logger = logging.getLogger(__name__)
SETTINGS = RefinerSettings.from_env()
SAFE_VERSION = re.compile(r"^[A-Za-z0-9_.-]+$")

raw_origins = os.getenv("FRONTEND_ORIGINS", "*")
allow_origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict[str, bool]:
    return {"ok": True}


class RefineRequest(BaseModel):
    text: str | None = None


class RefineResponse(BaseModel):
    refinedText: str
    tag: str
    contextCategory: str
    insight: str
    detectedLanguage: str
    originalText: str
    isFallback: bool


class TaxonomyOption(BaseModel):
    category: str
    label: str


class TaxonomyOptionsResponse(BaseModel):
    version: str
    locale: str
    default_category: str
    total: int
    options: list[TaxonomyOption]


class TaxonomyLatestResponse(BaseModel):
    latest: str
    options_url: str


@lru_cache(maxsize=1)
def _get_refiner() -> MemoRefiner:
    return build_refiner(settings=SETTINGS)


@app.get("/taxonomy/latest", response_model=TaxonomyLatestResponse)
def taxonomy_latest(response: Response) -> TaxonomyLatestResponse:
    response.headers["Cache-Control"] = "public, max-age=60"
    return TaxonomyLatestResponse(
        latest=SETTINGS.taxonomy_version,
        options_url=f"/taxonomy/{SETTINGS.taxonomy_version}/options",
    )


@app.get("/taxonomy/{version}/options", response_model=TaxonomyOptionsResponse)
def taxonomy_options(
    version: str,
    response: Response,
    locale: str = Query(default="en"),
) -> TaxonomyOptionsResponse:
    if locale not in SUPPORTED_LANGUAGES:
        raise HTTPException(status_code=400, detail=f"invalid locale: {locale}")
    if not SAFE_VERSION.match(version):
        raise HTTPException(status_code=404, detail=f"taxonomy version not found: {version}")

    # The configured version is served from the same source the refiner normalizes into.
    path = SETTINGS.taxonomy_path if version == SETTINGS.taxonomy_version else None
    try:
        taxonomy = load_taxonomy(version, path)
    except TaxonomyError as exc:
        raise HTTPException(status_code=404, detail=f"taxonomy version not found: {version}") from exc

    options = [
        TaxonomyOption(category=category, label=taxonomy.localized_label(category, locale))
        for category in taxonomy.categories
    ]
    response.headers["Cache-Control"] = "public, max-age=86400"
    return TaxonomyOptionsResponse(
        version=version,
        locale=locale,
        default_category=taxonomy.default_category,
        total=len(options),
        options=options,
    )


@app.post("/refine", response_model=RefineResponse)
async def refine_memo(body: RefineRequest) -> RefineResponse:
    if not body.text or not body.text.strip():
        raise HTTPException(status_code=400, detail="Text is required")

    try:
        refiner = _get_refiner()
        result = await refiner.refine(body.text)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except AuthenticationError as exc:
        logger.error("refinement provider is not configured: %s", exc)
        raise HTTPException(status_code=503, detail="refinement service is not configured") from exc
    except Exception as exc:
        logger.exception("refine failed")
        raise HTTPException(status_code=500, detail="internal_error") from exc

    return RefineResponse(
        refinedText=result.refined,
        tag=result.tag,
        contextCategory=result.context,
        insight=result.insight,
        detectedLanguage=result.language,
        originalText=result.original_text,
        isFallback=result.is_fallback,
    )
