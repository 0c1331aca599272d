"""
Common/Shared Fixtures

Base factories and generators used across multiple test modules.
"""
import random
import string
import uuid
from datetime import datetime, timezone
from typing import Optional


def make_email(prefix: Optional[str] = None) -> str:
    """Generate a unique email"""
    prefix = prefix or f"alerts_{uuid.uuid4().hex[:8]}"
    return f"{prefix}@acme.com"


def make_timestamp() -> datetime:
    """Current UTC timestamp without tzinfo, as stored in the database"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def random_string(length: int = 8) -> str:
    """Generate a random lowercase string"""
    return "".join(random.choices(string.ascii_lowercase, k=length))
