from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from subwaymap import __version__
from subwaymap.api.routes import router
from subwaymap.config import CORS_ALLOWED_ORIGINS

app = FastAPI(
    title="Subway Map",
    version=__version__,
)

# Middleware before routes
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
