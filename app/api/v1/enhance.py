from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import PlainTextResponse

from app.api.dependencies import GenerationFactory, get_cooldown_limiter, get_generation_factory
from app.core.cooldown_rate_limit import CooldownRateLimiter
from app.core.rate_limit import client_key, rate_limit
from app.core.security import check_api_key
from app.parsing.parse import render_enhancement_reply
from app.schemas.enhance import EnhanceRequest, EnhancementView
from app.services.enhance_service import enhance_resume
from app.services.presentation import to_view

router = APIRouter()


@router.post(
    "/processResumeWithGemini",
    response_class=PlainTextResponse,
    summary="Tailor a LaTeX resume",
    description="Returns the tailored resume and analysis in the tagged text format.",
)
@rate_limit()
async def process_resume(
    request: Request,
    payload: EnhanceRequest,
    cooldown: CooldownRateLimiter = Depends(get_cooldown_limiter),
    make_generation: GenerationFactory = Depends(get_generation_factory),
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
):
    check_api_key(x_api_key)
    result = await enhance_resume(
        payload.resume_source,
        payload.job_description,
        client_id=client_key(request),
        cooldown=cooldown,
        make_generation=make_generation,
    )
    return PlainTextResponse(render_enhancement_reply(result))


@router.post("/v1/enhance", response_model=EnhancementView, summary="Tailor a LaTeX resume for the editor view")
@rate_limit()
async def enhance_for_view(
    request: Request,
    payload: EnhanceRequest,
    cooldown: CooldownRateLimiter = Depends(get_cooldown_limiter),
    make_generation: GenerationFactory = Depends(get_generation_factory),
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
):
    check_api_key(x_api_key)
    result = await enhance_resume(
        payload.resume_source,
        payload.job_description,
        client_id=client_key(request),
        cooldown=cooldown,
        make_generation=make_generation,
    )
    return to_view(result)
