from sqlalchemy import Column, String, Integer, ForeignKey, UUID, DateTime, Enum, UniqueConstraint
from sqlalchemy.orm import relationship

from codedpad.core.db import Base
from codedpad.db.base import BaseModel, utcnow
from codedpad.domains.access import Visibility


class File(BaseModel):
    __tablename__ = "files"

    owner_id = Column(String(255), index=True, nullable=False)
    blob_ref = Column(String(64), unique=True, nullable=False)
    filename = Column(String(255), nullable=False)
    content_type = Column(String(255), nullable=False)
    size = Column(Integer, nullable=False)
    visibility = Column(Enum(Visibility, name="visibility"), nullable=False, default=Visibility.PUBLIC)
    secondary_code = Column(String(255), nullable=True)

    # Relationships
    saves = relationship(
        "FileSave",
        back_populates="file",
        cascade="all, delete-orphan",
        order_by="FileSave.saved_at"
    )


class FileSave(Base):
    __tablename__ = "file_saves"
    __table_args__ = (UniqueConstraint("file_id", "user_id", name="uq_file_saves_file_user"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    file_id = Column(UUID(as_uuid=True), ForeignKey("files.uuid", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(255), index=True, nullable=False)
    saved_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    file = relationship("File", back_populates="saves")
