import asyncio
import logging

import uvicorn

from .config import Settings
from .logging_config import setup_logging
from .main import create_app
from .redirect import create_redirect_app

logger = logging.getLogger(__name__)


def build_servers(settings: Settings) -> list[uvicorn.Server]:
    tls = bool(settings.SSL_CERTFILE and settings.SSL_KEYFILE)
    servers = [
        uvicorn.Server(uvicorn.Config(
            create_app(settings),
            host="0.0.0.0",
            port=settings.HTTPS_PORT,
            ssl_certfile=settings.SSL_CERTFILE if tls else None,
            ssl_keyfile=settings.SSL_KEYFILE if tls else None,
            log_config=None,
        ))
    ]
    if tls:
        servers.append(uvicorn.Server(uvicorn.Config(
            create_redirect_app(settings),
            host="0.0.0.0",
            port=settings.HTTP_PORT,
            log_config=None,
            lifespan="off",
        )))
    else:
        logger.warning(f"No TLS certificate configured, serving plain HTTP on port {settings.HTTPS_PORT}")
    return servers


async def serve(settings: Settings):
    servers = build_servers(settings)
    logger.info(f"Server started at ports {', '.join(str(s.config.port) for s in servers)}")
    tasks = [asyncio.create_task(server.serve()) for server in servers]
    # Only one server receives the shutdown signal; stop the rest with it
    await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    for server in servers:
        server.should_exit = True
    await asyncio.gather(*tasks)


def main():
    settings = Settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    asyncio.run(serve(settings))


if __name__ == "__main__":
    main()
