#!/usr/bin/env python3
"""Initialize the DreamBoard database"""

import asyncio
from database import engine, DATABASE_URL
from models import Base

async def init_database():
    """Initialize the database tables"""
    print(f"Initializing database: {DATABASE_URL}")

    try:
        # Create all tables
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        print("Database tables created successfully!")

    except Exception as e:
        print(f"Error creating database tables: {e}")
        raise
    finally:
        await engine.dispose()

if __name__ == "__main__":
    asyncio.run(init_database())
