from fastapi import (
    FastAPI,
)
from fastapi.middleware.cors import CORSMiddleware

from relay import __version__
from relay.core.context import ServiceContext, build_context
from relay.routers import get_routers
from relay.shared import Logger, load_config
from relay.shared.http import register_error_handlers

logger = Logger(__name__).get_logger()

config = load_config()


# ================================================================================
#       FastAPI Setup
# ================================================================================
def create_app(context: ServiceContext | None = None) -> FastAPI:
    context = context or build_context(config)

    app = FastAPI(title=context.config.general.title, version=__version__)
    app.state.context = context

    for router in get_routers():
        app.include_router(router)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=context.config.network.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    return app


# ================================================================================
#       Command Line
# ================================================================================
def welcome():
    # Log server banner
    for line in config.general.title.split("\n"):
        logger.info(line)

    # Log server startup information
    logger.info("Starting relay %s on port %s", __version__, config.network.port)


def main(argv=None):
    welcome()

    import uvicorn

    uvicorn.run(
        "relay.main:create_app",
        factory=True,
        host=config.network.host,
        port=config.network.port,
        reload=config.network.reload,
    )


if __name__ == "__main__":
    main()
