from sqlalchemy import Column, DateTime
from datetime import datetime
from dotenv import load_dotenv
import os
import pytz

load_dotenv()

APP_TIMEZONE = os.getenv("APP_TIMEZONE", "America/Santiago")


def now_local() -> datetime:
    return datetime.now(pytz.timezone(APP_TIMEZONE))


class TimestampMixin:
    """Mixin that provides created/updated timestamps.

    Rows are hard deleted, so there are no soft-delete columns here. The owning
    user is modelled explicitly on the tables that have one (``user_id``).
    """
    # DateTime(timezone=True) ensures the timezone info is persisted in the database.
    created_at = Column(DateTime(timezone=True), default=now_local)
    updated_at = Column(DateTime(timezone=True), onupdate=now_local)
