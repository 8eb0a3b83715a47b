from datetime import datetime

from sqlmodel import Field, SQLModel


class DBKvStore(SQLModel, table=True):
    __tablename__ = "kv_store"

    key: str = Field(primary_key=True)
    value: str
    updated_at: datetime = Field(default_factory=datetime.utcnow)
