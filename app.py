import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from popcorn_assistant.utilities import app_config
from router.assistant_router import router as popcorn_assistant_router
from router.catalog_router import router as catalog_browse_router

# basic logging config
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)


# initiate the app
API_VERSION = "1.0.0"
API_TITLE = "Popcorn Assistant API"
app = FastAPI(
    title=API_TITLE,
    version=API_VERSION)

# the chat front end is served from another origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=app_config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],)


# app health check
@app.get("/status")
async def status():
    return {
        "status": "running",
        "message": "Popcorn Assistant API is up & running!"}


# app version check endpoint
@app.get("/version")
async def version():
    logging.info(f"Version endpoint called")
    return {
        "version": API_VERSION,
        "title": API_TITLE}


# initiate the assistant and catalog routers
app.include_router(popcorn_assistant_router, prefix="/api")
app.include_router(catalog_browse_router, prefix="/api")
