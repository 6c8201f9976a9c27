"""
Portable column types shared by the catalog models.
"""

import uuid

from sqlalchemy import JSON, Text
from sqlalchemy.dialects.postgresql import ARRAY

# Set-valued column: native text[] on PostgreSQL (GIN-indexable, && overlap),
# a JSON list everywhere else.
StringList = JSON().with_variant(ARRAY(Text), "postgresql")


def new_id() -> str:
    return str(uuid.uuid4())
