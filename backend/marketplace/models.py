from datetime import datetime
from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from .db import Base


PROFILE_TYPES = ("client", "contractor")
CONTRACT_STATUSES = ("new", "in_progress", "terminated")
TERMINATED = "terminated"


class Profile(Base):
    __tablename__ = "profiles"
    __table_args__ = (CheckConstraint("balance >= 0", name="ck_profiles_balance_non_negative"),)

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(128), nullable=False)
    last_name = Column(String(128), nullable=False)
    profession = Column(String(128), nullable=False)
    balance = Column(Numeric(12, 2), nullable=False, default=0)
    type = Column(Enum(*PROFILE_TYPES, name="profile_type"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    client_contracts = relationship("Contract", foreign_keys="Contract.client_id", back_populates="client")
    contractor_contracts = relationship("Contract", foreign_keys="Contract.contractor_id", back_populates="contractor")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Contract(Base):
    __tablename__ = "contracts"

    id = Column(Integer, primary_key=True, index=True)
    terms = Column(Text, nullable=False)
    status = Column(Enum(*CONTRACT_STATUSES, name="contract_status"), nullable=False, default="new")
    client_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    contractor_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    client = relationship("Profile", foreign_keys=[client_id], back_populates="client_contracts")
    contractor = relationship("Profile", foreign_keys=[contractor_id], back_populates="contractor_contracts")
    jobs = relationship("Job", back_populates="contract")


class Job(Base):
    __tablename__ = "jobs"
    __table_args__ = (CheckConstraint("price > 0", name="ck_jobs_price_positive"),)

    id = Column(Integer, primary_key=True, index=True)
    description = Column(Text, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    paid = Column(Boolean, nullable=False, default=False)
    payment_date = Column(DateTime, nullable=True)
    contract_id = Column(Integer, ForeignKey("contracts.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    contract = relationship("Contract", back_populates="jobs")
