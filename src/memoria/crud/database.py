"""Engine creation and schema initialization"""

from sqlmodel import SQLModel, create_engine

# Registers the table metadata before create_all runs.
from memoria.crud import models  # noqa: F401


def make_engine(db_url: str):
    return create_engine(db_url, echo=False)


def init_db(engine) -> None:
    SQLModel.metadata.create_all(engine)


def reset_db(engine) -> None:
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
