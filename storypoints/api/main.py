import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from storypoints.config import settings
from storypoints.logging_config import configure_logging
from .routes import router

load_dotenv()

configure_logging(logging.DEBUG if settings.APP_DEBUG else logging.INFO)
app = FastAPI(title="Story Point Estimator API", version="0.1.0",
    docs_url="/swagger",
    redoc_url=None,)
app.include_router(router)
