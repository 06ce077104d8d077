from sqlalchemy import (
    Column, Integer, String, DateTime, SmallInteger, BigInteger,
    ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

# BIGSERIAL on PostgreSQL, INTEGER PRIMARY KEY (rowid alias) on SQLite
IdType = BigInteger().with_variant(Integer, "sqlite")

class Account(Base):
    __tablename__ = 'accounts'

    acc_id = Column(IdType, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String(100), nullable=False, unique=True)

    # Metadata
    created_at = Column(DateTime, default=func.now())

    # Relationships
    characters = relationship("Character", back_populates="account", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Account(acc_id={self.acc_id}, username='{self.username}')>"

class Character(Base):
    __tablename__ = 'characters'

    char_id = Column(IdType, primary_key=True, autoincrement=True)
    acc_id = Column(IdType, ForeignKey('accounts.acc_id'), nullable=False, index=True)
    class_id = Column(SmallInteger, nullable=False, index=True)

    # Relationships
    account = relationship("Account", back_populates="characters")
    scores = relationship("Score", back_populates="character", cascade="all, delete-orphan")

    # One character per class per account
    __table_args__ = (UniqueConstraint('acc_id', 'class_id'),)

    def __repr__(self):
        return f"<Character(char_id={self.char_id}, acc_id={self.acc_id}, class_id={self.class_id})>"

class Score(Base):
    __tablename__ = 'scores'

    score_id = Column(IdType, primary_key=True, autoincrement=True)
    char_id = Column(IdType, ForeignKey('characters.char_id'), nullable=False, index=True)
    reward_score = Column(Integer, nullable=False)

    # Metadata
    recorded_at = Column(DateTime, default=func.now())

    # Relationships
    character = relationship("Character", back_populates="scores")

    def __repr__(self):
        return f"<Score(char_id={self.char_id}, reward_score={self.reward_score})>"
