from datetime import datetime

import pytz
from flask import current_app


def local_now():
    """Naive 'now' in the configured DEFAULT_TIMEZONE, matching how task dates/times are stored."""
    tz = pytz.timezone(current_app.config.get('DEFAULT_TIMEZONE', 'UTC'))
    return datetime.now(tz).replace(tzinfo=None)


def local_today():
    return local_now().date()
