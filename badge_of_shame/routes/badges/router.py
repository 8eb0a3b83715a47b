from fastapi import APIRouter, Depends
from fastapi.responses import Response
from badge_of_shame.routes.badges.service import BadgeService, get_badge_service
from badge_of_shame.utils.svg import SVG_MEDIA_TYPE

router = APIRouter()


@router.get("/{owner}/{repo}", response_class=Response)
async def get_badge(
    owner: str,
    repo: str,
    badge_service: BadgeService = Depends(get_badge_service),
) -> Response:
    svg = await badge_service.resolve(f"{owner}/{repo}")
    return Response(
        content=svg,
        media_type=SVG_MEDIA_TYPE,
        headers={"Cache-Control": "no-cache, max-age=0"},
    )
