from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from shared.core.config import FABRICATION_DATABASE_URL

Base = declarative_base()

POOL_SIZE = 2
MAX_OVERFLOW = 2

if FABRICATION_DATABASE_URL.startswith("sqlite"):
    # single shared connection so an in-memory database survives across sessions
    fabrication_engine = create_engine(
        FABRICATION_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    fabrication_engine = create_engine(
        FABRICATION_DATABASE_URL,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=POOL_SIZE,          # max idle connections
        max_overflow=MAX_OVERFLOW,      # max temporary extra connections
        pool_timeout=30       # wait time before failing
    )

FabricationSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=fabrication_engine)


# Dependency
def get_fabrication_db():
    db = FabricationSessionLocal()
    try:
        yield db
    finally:
        db.close()
