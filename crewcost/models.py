"""
Database models and SQLAlchemy setup for crewcost.
All monetary values stored as integer cents to avoid float drift.
"""
from datetime import datetime
from sqlalchemy import (
    create_engine, Column, Integer, BigInteger, String, DateTime, Date, Text,
    ForeignKey, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import declarative_base, sessionmaker, relationship

from crewcost.config import get_config
from crewcost.domain.entities import CostStatus, MemberRole, SplitMode

DATABASE_URL = get_config().database_url
_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


class User(Base):
    """Account that can sign in and belong to projects."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=True)
    email = Column(String(320), unique=True, index=True, nullable=False)  # Stored lower-cased
    password_hash = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    memberships = relationship("ProjectMember", back_populates="user", cascade="all, delete-orphan")


# =============================================================================
# Project (the tenant boundary)
# =============================================================================

class Project(Base):
    """
    Expense tracking project.
    All members, costs and allocations belong to a project.
    budget_cents NULL means the project has no budget cap.
    """
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    currency = Column(String(3), nullable=False, default="USD")
    owner_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    budget_cents = Column(BigInteger, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    owner = relationship("User")
    members = relationship("ProjectMember", back_populates="project", cascade="all, delete-orphan")
    costs = relationship("Cost", back_populates="project", cascade="all, delete-orphan")
    allocations = relationship("BudgetAllocation", back_populates="project", cascade="all, delete-orphan")


class ProjectMember(Base):
    """
    Membership of a user in a project.
    The creator is always present with role 'owner'.
    """
    __tablename__ = "project_members"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey('projects.id', ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(10), nullable=False, default=MemberRole.MEMBER.value)  # owner, member
    joined_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    project = relationship("Project", back_populates="members")
    user = relationship("User", back_populates="memberships")

    __table_args__ = (
        UniqueConstraint('project_id', 'user_id', name='uq_project_member'),
    )


# =============================================================================
# Cost Ledger
# =============================================================================

class Cost(Base):
    """
    Expense paid by a member.
    INVARIANT: Σ(CostSplit.amount_cents) == amount_cents
    Status moves tentative -> final only.
    """
    __tablename__ = "costs"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey('projects.id', ondelete="CASCADE"), nullable=False, index=True)
    payer_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    amount_cents = Column(BigInteger, nullable=False)
    category = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    cost_date = Column(Date, nullable=False, index=True)
    status = Column(String(10), nullable=False, default=CostStatus.FINAL.value, index=True)  # tentative, final
    receipt_url = Column(Text, nullable=True)  # Opaque URL from receipt storage
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    project = relationship("Project", back_populates="costs")
    payer = relationship("User")
    splits = relationship("CostSplit", back_populates="cost", cascade="all, delete-orphan",
                          order_by="CostSplit.id")

    __table_args__ = (
        CheckConstraint('amount_cents > 0', name='ck_cost_amount_positive'),
    )


class CostSplit(Base):
    """Share of a cost owed by one member. Written together with its cost."""
    __tablename__ = "cost_splits"

    id = Column(Integer, primary_key=True, index=True)
    cost_id = Column(Integer, ForeignKey('costs.id', ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    amount_cents = Column(BigInteger, nullable=False)
    split_mode = Column(String(12), nullable=False, default=SplitMode.EQUAL.value)  # equal, exact, percentage

    cost = relationship("Cost", back_populates="splits")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint('cost_id', 'user_id', name='uq_cost_split_user'),
        CheckConstraint('amount_cents >= 0', name='ck_split_amount_non_negative'),
    )


# =============================================================================
# Financial Planner
# =============================================================================

class BudgetAllocation(Base):
    """
    Planned spending line item against the project budget.
    Independent of actual costs.
    """
    __tablename__ = "budget_allocations"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey('projects.id', ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    amount_cents = Column(BigInteger, nullable=False)
    ticket_ref = Column(String(100), nullable=True)  # External ticket id
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    project = relationship("Project", back_populates="allocations")

    __table_args__ = (
        CheckConstraint('amount_cents > 0', name='ck_allocation_amount_positive'),
    )


def init_db():
    """Initialize the database and create all tables."""
    Base.metadata.create_all(bind=engine)


def get_db():
    """Database session dependency for FastAPI."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
