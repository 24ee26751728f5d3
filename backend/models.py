from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, Boolean
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    username = Column(String(50), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)  # passlib hash
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    dreams = relationship("Dream", back_populates="user")

class Dream(Base):
    __tablename__ = 'dreams'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text)
    cover_image = Column(Text)
    next_action = Column(Text)
    ai_confidence = Column(Integer)  # 0-100
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="dreams")
    tasks = relationship("Task", back_populates="dream")
    resources = relationship("Resource", back_populates="dream")
    vision_items = relationship("VisionItem", back_populates="dream")

class Task(Base):
    __tablename__ = 'tasks'

    id = Column(Integer, primary_key=True)
    dream_id = Column(Integer, ForeignKey('dreams.id'), nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text)
    status = Column(String(10), nullable=False, default='To-Do')
    priority = Column(String(10), nullable=False, default='Medium')
    due_date = Column(DateTime(timezone=True))
    completed_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    dream = relationship("Dream", back_populates="tasks")

class Resource(Base):
    __tablename__ = 'resources'

    id = Column(Integer, primary_key=True)
    dream_id = Column(Integer, ForeignKey('dreams.id'), nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text)
    type = Column(String(20), nullable=False)
    url = Column(Text, nullable=False)
    is_verified = Column(Boolean, default=False)
    is_free = Column(Boolean, default=True)
    read_time = Column(Integer)  # minutes, articles
    duration = Column(Integer)  # minutes, videos
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    dream = relationship("Dream", back_populates="resources")

class VisionItem(Base):
    __tablename__ = 'vision_items'

    id = Column(Integer, primary_key=True)
    dream_id = Column(Integer, ForeignKey('dreams.id'), nullable=False, index=True)
    title = Column(Text)
    description = Column(Text)
    type = Column(String(20), nullable=False, default='image')
    url = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    dream = relationship("Dream", back_populates="vision_items")
