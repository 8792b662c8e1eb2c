import logging

from fastapi import FastAPI

import snapart.routers.api as images_router
from snapart.config import LOG_LEVEL
from snapart.deps import lifespan

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


def create_app() -> FastAPI:

    app = FastAPI(title="SnapArt Image Stylization API", lifespan=lifespan)

    from fastapi.middleware.cors import CORSMiddleware

    app.add_middleware(
        CORSMiddleware,
        # In production, replace with the client app's domain
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(images_router.get_router(), prefix="/snapart/api")

    @app.get("/health")
    async def health():
        return {"ok": True}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
