from sqlalchemy import Column, Integer, String, Text
from gamedev_hub.database import Base


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    associated_user = Column(Integer, nullable=False, index=True)  # users.id, checked in the repository
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    link = Column(String, nullable=False)
