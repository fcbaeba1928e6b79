from sqlalchemy import Column, String, Text, Enum

from codedpad.db.base import BaseModel
from codedpad.domains.access import Visibility


class Note(BaseModel):
    __tablename__ = "notes"

    owner_id = Column(String(255), index=True, nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    visibility = Column(Enum(Visibility, name="visibility"), nullable=False, default=Visibility.PUBLIC)
    secondary_code = Column(String(255), nullable=True)
