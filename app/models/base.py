# app/models/base.py
import uuid

import nanoid
from sqlalchemy import String, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


class Base(DeclarativeBase):
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    sid: Mapped[str] = mapped_column(String(22), unique=True, nullable=False, index=True)

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return cls.__name__.lower()

    @staticmethod
    def generate_sid():
        """Short id used in the external API and in cross-table references"""
        return nanoid.generate(size=22)
