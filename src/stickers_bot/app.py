"""
Stickers Bot - Teams messaging extension webhook
Authenticates compose extension queries and answers with matching stickers
"""

import asyncio
import sys
from datetime import datetime, timezone
from typing import Optional

import structlog
from aiohttp import web
from aiohttp.web import Request, Response, json_response
from botbuilder.core.integration import aiohttp_error_middleware
from botbuilder.schema import Activity
from botframework.connector.auth import (
    JwtTokenValidation,
    SimpleChannelProvider,
    SimpleCredentialProvider,
)
from dotenv import load_dotenv
from jwt.exceptions import PyJWTError
from msrest.exceptions import DeserializationError

from . import __version__
from .compose_extension import build_response, is_compose_extension_query, parse_query
from .config import Settings
from .errors import ConfigurationError
from .indexer import StickerSetIndexer
from .repository import StickerCatalogFetcher, StickerSetRepository

logger = structlog.get_logger(__name__)

UNSUPPORTED_ACTIVITY_MESSAGE = (
    "App only supports messaging extension query activity types."
)


def create_app(
    settings: Settings, fetcher: Optional[StickerCatalogFetcher] = None
) -> web.Application:
    """Create the web application"""

    fetcher = fetcher or StickerCatalogFetcher()
    repository = StickerSetRepository(
        fetcher, settings.config_uri, settings.cached_sticker_set_ttl_mins
    )
    credential_provider = SimpleCredentialProvider(settings.microsoft_app_id, "")
    channel_provider = SimpleChannelProvider()

    async def messages(req: Request) -> Response:
        """Handle messaging extension queries"""
        logger.info("Messages endpoint received a request")

        if "application/json" not in req.headers.get("Content-Type", ""):
            return Response(status=415, text="Unsupported Media Type")

        try:
            body = await req.json()
            if not isinstance(body, dict):
                raise ValueError("Activity payload must be a JSON object")
            activity = Activity().deserialize(body)
        except (ValueError, DeserializationError) as e:
            logger.debug("Failed to parse request payload", error=str(e))
            return Response(status=400, text="Invalid activity payload")

        auth_header = req.headers.get("Authorization", "")
        try:
            await JwtTokenValidation.authenticate_request(
                activity, auth_header, credential_provider, channel_provider
            )
        except (PermissionError, PyJWTError) as e:
            logger.debug("Request was not properly authorized", error=str(e))
            return Response(status=401)

        logger.info(
            "Received activity",
            activity_id=activity.id,
            activity_type=activity.type,
            activity_name=activity.name,
            channel_id=activity.channel_id,
        )

        if not is_compose_extension_query(activity):
            logger.debug("Request payload was not a messaging extension query")
            return Response(status=400, text=UNSUPPORTED_ACTIVITY_MESSAGE)

        try:
            query = parse_query(activity.value)

            sticker_set = await repository.get_sticker_set()
            indexer = StickerSetIndexer()
            indexer.index_sticker_set(sticker_set)
            stickers = indexer.find_stickers_by_query(
                query.text, query.skip, query.count
            )

            logger.info(
                "Answered sticker query",
                query=query.text[:100],
                skip=query.skip,
                count=query.count,
                initial_run=query.initial_run,
                results=len(stickers),
            )
            return json_response(build_response(stickers))
        except Exception as e:
            logger.error("Error processing activity", error=str(e))
            return Response(status=500, text=str(e))

    async def health(req: Request) -> Response:
        """Health check endpoint"""
        cached, cached_at = repository.snapshot()
        return json_response(
            {
                "status": "healthy",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "sticker_set": cached.name if cached else None,
                "sticker_count": len(cached.stickers) if cached else 0,
                "cached_at": cached_at.isoformat() if cached_at else None,
                "config_uri_configured": settings.config_uri is not None,
                "version": __version__,
            }
        )

    async def cleanup(app) -> None:
        """Cleanup on shutdown"""
        await fetcher.close()

    app = web.Application(middlewares=[aiohttp_error_middleware])
    app.router.add_post("/api/messages", messages)
    app.router.add_get("/health", health)
    app.on_cleanup.append(cleanup)

    return app


def configure_logging(level: int = 20) -> None:
    """Configure structured logging for the running service"""
    structlog.configure(
        processors=[structlog.dev.ConsoleRenderer()],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def main():
    """Main entry point"""
    configure_logging()
    load_dotenv()

    try:
        settings = Settings.from_env()

        if sys.platform == "win32":
            asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())

        app = create_app(settings)

        logger.info(
            "Starting Stickers Bot",
            host=settings.host,
            port=settings.port,
            config_uri=settings.config_uri,
            ttl_minutes=settings.cached_sticker_set_ttl_mins,
        )

        web.run_app(app, host=settings.host, port=settings.port)

    except ConfigurationError as e:
        logger.error("Invalid configuration", setting=e.setting, error=str(e))
        sys.exit(1)
    except Exception as e:
        logger.error("Failed to start Stickers Bot", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
