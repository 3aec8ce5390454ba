from sqlalchemy import Column, Integer, String, Text, ForeignKey

from .base import Base


class CollegeModel(Base):
    __tablename__ = "colleges"

    college_id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    location = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    created_by = Column(
        Integer,
        ForeignKey("users.user_id", use_alter=True, name="fk_colleges_created_by"),
        nullable=False,
    )
    created_at = Column(String, nullable=False)
