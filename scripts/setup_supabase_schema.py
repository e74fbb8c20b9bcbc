#!/usr/bin/env python3
"""
Setup script to initialize the Supabase backend.
Creates the prompts table from the SQLAlchemy models and the public bucket
that holds preview images.
"""

import os
import sys

# Add the parent directory to sys.path to import prompty modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from prompty.database import Base, wait_for_database  # noqa: E402
from prompty.models import models  # noqa: E402,F401
from prompty.services.storage_service import StorageClient  # noqa: E402
from prompty.utils.exceptions import StorageError  # noqa: E402


def setup_database():
    """
    Create all tables defined in SQLAlchemy models.
    """
    print("Creating database schema in Supabase...")

    engine = wait_for_database()
    Base.metadata.create_all(bind=engine)

    print("Database schema created successfully!")
    print("The following tables have been created:")
    for table in Base.metadata.tables:
        print(f"- {table}")


def setup_storage():
    storage = StorageClient()
    print(f"Creating public storage bucket '{storage.bucket}'...")
    try:
        storage.create_bucket(public=True)
    except StorageError as e:
        # Supabase answers 409 for an existing bucket
        if e.status_code not in (400, 409):
            raise
        print(f"Bucket already exists: {e.message}")
    else:
        print("Bucket created successfully!")


if __name__ == "__main__":
    setup_database()
    setup_storage()
