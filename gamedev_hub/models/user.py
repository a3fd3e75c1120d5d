# models/user.py
from sqlalchemy import Column, Integer, String, Text
from gamedev_hub.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    discord_id = Column(String, unique=True, nullable=False)  # from Discord, never changes
    username = Column(String, nullable=False)                   # mirrored on each new login
    avatar = Column(String, nullable=False, default="")
    access_token = Column(Text, nullable=True)
    refresh_token = Column(Text, nullable=True)
    bio = Column(Text, nullable=False, default="")
