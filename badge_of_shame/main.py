from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import Response
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException
from badge_of_shame.routes.badges.router import router as badges_router
from badge_of_shame.routes.health import router as health_router
from badge_of_shame.settings import settings
from badge_of_shame.utils.app_lifespan import lifespan
from badge_of_shame.utils.logger import logger


async def not_found_handler(request: Request, exc: StarletteHTTPException) -> Response:
    # Anything that is not /{owner}/{repo} gets a bare 404, never a badge
    if exc.status_code == 404:
        return Response(status_code=404)
    return await http_exception_handler(request, exc)


def get_application() -> FastAPI:
    app = FastAPI(
        title="Badge Of Shame",
        lifespan=lifespan,
        docs_url="/docs" if settings.ENVIRONMENT == "LOCAL" else None,
        redoc_url="/redoc" if settings.ENVIRONMENT == "LOCAL" else None,
        swagger_ui_oauth2_redirect_url=None,
        redirect_slashes=False,
    )
    logger.info(f"FastAPI application initialising for ENVIRONMENT={settings.ENVIRONMENT}")

    app.add_exception_handler(StarletteHTTPException, not_found_handler)

    app.include_router(health_router)
    app.include_router(badges_router)

    for route in app.routes:
        if isinstance(route, APIRoute):
            logger.info(f"HTTP Route added: {route.path} - {route.methods}")

    return app


application = get_application()
