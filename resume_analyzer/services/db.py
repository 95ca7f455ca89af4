import motor.motor_asyncio
from pymongo import ASCENDING, DESCENDING

from resume_analyzer.models.settings import StoreSettings
from resume_analyzer.utils.logging_config import get_logger

logger = get_logger(__name__)

_client = None


def get_client(settings: StoreSettings) -> motor.motor_asyncio.AsyncIOMotorClient:
    """Process-wide motor client, created on first use."""
    global _client
    if _client is None:
        connection = settings.require_connection()
        logger.info(f"Initializing MongoDB connection to database: {settings.db_name}")
        _client = motor.motor_asyncio.AsyncIOMotorClient(connection)
        logger.info("MongoDB client initialized successfully")
    return _client


def get_reports_collection(settings: StoreSettings):
    return get_client(settings)[settings.db_name][settings.reports_collection]


def close_client():
    global _client
    if _client is not None:
        _client.close()
        _client = None
        logger.info("MongoDB client closed")


async def init_indexes(reports_coll):
    """Index initialization for the reports collection."""
    logger.info("Starting database index initialization")

    try:
        await reports_coll.create_index([("report_id", ASCENDING)], unique=True)
        logger.debug("Created unique index on reports.report_id")
    except Exception as e:
        if "already exists" in str(e).lower():
            logger.debug("Index on reports.report_id already exists")
        else:
            logger.warning(f"Could not create unique index on reports.report_id: {e}")

    try:
        await reports_coll.create_index([("owner", ASCENDING), ("created_at", DESCENDING)])
        logger.debug("Created compound index on reports.(owner, created_at)")
    except Exception as e:
        logger.warning(f"Could not create index on reports.(owner, created_at): {e}")

    logger.info("Database index initialization completed")


def to_dict(doc):
    if not doc:
        return None
    doc = dict(doc)
    doc.pop("_id", None)
    return doc
