#run it with uvicorn contact_relay.main:app --reload
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from dotenv import load_dotenv
import logging
import os

from contact_relay.api.api_router import api_router
from contact_relay.core.attachments import AttachmentStore
from contact_relay.core.config import Settings, get_settings
from contact_relay.core.notifier import MailSettings, Notifier
from contact_relay.db.init_db import initialize_database
from contact_relay.db.mongo import connect_mongo
from contact_relay.db.submissions import SubmissionRepository

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect to MongoDB on startup and close the client on shutdown"""
    settings = app.state.settings
    app.state.attachment_store.ensure_directory()

    client, db = await connect_mongo(settings)
    app.state.client = client
    app.state.repository = SubmissionRepository.from_db(db)

    if db is not None:
        if await initialize_database(db):
            logger.info("✅ Database initialization completed successfully")
        else:
            logger.warning("⚠️ Database initialization completed with warnings")

    if not app.state.notifier.is_configured:
        logger.warning("SMTP settings are incomplete. Submissions will not be emailed.")

    yield

    if client is not None:
        client.close()
        logger.info("MongoDB connections closed successfully")


def create_app(settings: Settings = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(title="Contact Relay", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Process wide services; the repository is replaced once MongoDB is connected
    app.state.settings = settings
    app.state.client = None
    app.state.attachment_store = AttachmentStore(settings.uploads_dir)
    app.state.repository = SubmissionRepository()
    app.state.notifier = Notifier(MailSettings.from_settings(settings))

    app.include_router(api_router)

    # Mounted last so /api routes take precedence
    if settings.static_dir:
        if os.path.isdir(settings.static_dir):
            app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
        else:
            logger.info(f"STATIC_DIR {settings.static_dir} does not exist, static files disabled")

    return app


app = create_app()


def run():
    import uvicorn

    settings = get_settings()
    logger.info(f"Server running on http://localhost:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
