import uuid

from sqlalchemy import (
    Column, Integer, String, Date, DateTime, Boolean, Text,
    ForeignKey, BigInteger, UniqueConstraint, CheckConstraint, Index
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def _new_uuid() -> str:
    return str(uuid.uuid4())


class League(Base):
    __tablename__ = 'leagues'

    id = Column(String(36), primary_key=True, default=_new_uuid)
    name = Column(String(200), nullable=False)

    # Earliest date counted by this league; earlier submissions are always excluded
    counting_start_date = Column(Date, nullable=True)

    # Metadata
    created_at = Column(DateTime, default=func.now())

    # Relationships
    memberships = relationship("Membership", back_populates="league", cascade="all, delete-orphan")
    proxy_members = relationship("ProxyMember", back_populates="league", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<League(id='{self.id}', name='{self.name}')>"

class User(Base):
    __tablename__ = 'users'

    id = Column(String(36), primary_key=True, default=_new_uuid)
    display_name = Column(String(100), nullable=True)
    nickname = Column(String(100), nullable=True)

    # Metadata
    created_at = Column(DateTime, default=func.now())

    memberships = relationship("Membership", back_populates="user", cascade="all, delete-orphan")
    record = relationship("UserRecord", back_populates="user", uselist=False, cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id='{self.id}', display_name='{self.display_name}')>"

class Membership(Base):
    __tablename__ = 'memberships'

    id = Column(Integer, primary_key=True)
    league_id = Column(String(36), ForeignKey('leagues.id'), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey('users.id'), nullable=False, index=True)
    role = Column(String(20), default='member')  # owner, admin, member
    joined_at = Column(DateTime, default=func.now())

    league = relationship("League", back_populates="memberships")
    user = relationship("User", back_populates="memberships")

    __table_args__ = (UniqueConstraint('league_id', 'user_id', name='uq_membership_league_user'),)

    def __repr__(self):
        return f"<Membership(league_id='{self.league_id}', user_id='{self.user_id}', role='{self.role}')>"

class ProxyMember(Base):
    """Placeholder participant managed inside a single league."""
    __tablename__ = 'proxy_members'

    id = Column(String(36), primary_key=True, default=_new_uuid)
    league_id = Column(String(36), ForeignKey('leagues.id'), nullable=False, index=True)
    display_name = Column(String(100), nullable=False)
    created_at = Column(DateTime, default=func.now())

    league = relationship("League", back_populates="proxy_members")

    def __repr__(self):
        return f"<ProxyMember(id='{self.id}', league_id='{self.league_id}', name='{self.display_name}')>"

class Submission(Base):
    """
    Daily step submission for a user or a proxy member.

    No uniqueness on (user, date): legacy data holds one row per league, so
    readers deduplicate. ``league_id`` records where the row was submitted but
    user steps count toward every league the user belongs to.
    """
    __tablename__ = 'submissions'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey('users.id'), nullable=True)
    proxy_member_id = Column(String(36), ForeignKey('proxy_members.id'), nullable=True)
    league_id = Column(String(36), ForeignKey('leagues.id'), nullable=True)
    for_date = Column(Date, nullable=False)
    steps = Column(Integer, nullable=False, default=0)
    verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=func.now())

    __table_args__ = (
        CheckConstraint('steps >= 0', name='ck_submission_steps_non_negative'),
        CheckConstraint(
            '(user_id IS NOT NULL AND proxy_member_id IS NULL) OR (user_id IS NULL AND proxy_member_id IS NOT NULL)',
            name='ck_submission_single_owner'
        ),
        Index('ix_submissions_user_date', 'user_id', 'for_date'),
        Index('ix_submissions_proxy_date', 'proxy_member_id', 'for_date'),
    )

    def __repr__(self):
        owner = self.user_id or f"proxy {self.proxy_member_id}"
        return f"<Submission(owner='{owner}', date={self.for_date}, steps={self.steps}, verified={self.verified})>"

class UserRecord(Base):
    """Authoritative long-lived counters maintained outside the leaderboard engine."""
    __tablename__ = 'user_records'

    user_id = Column(String(36), ForeignKey('users.id'), primary_key=True)
    current_streak = Column(Integer, default=0)
    longest_streak = Column(Integer, default=0)
    total_steps_lifetime = Column(BigInteger, default=0)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="record")

    def __repr__(self):
        return f"<UserRecord(user_id='{self.user_id}', streak={self.current_streak}, lifetime={self.total_steps_lifetime})>"

class HighFive(Base):
    __tablename__ = 'high_fives'

    id = Column(Integer, primary_key=True)
    sender_id = Column(String(36), ForeignKey('users.id'), nullable=False, index=True)
    recipient_id = Column(String(36), ForeignKey('users.id'), nullable=False, index=True)
    created_at = Column(DateTime, default=func.now())

    def __repr__(self):
        return f"<HighFive(sender='{self.sender_id}', recipient='{self.recipient_id}')>"

class AppSetting(Base):
    """Runtime configuration values stored as JSON."""
    __tablename__ = 'app_settings'

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<AppSetting(key='{self.key}')>"
