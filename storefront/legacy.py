"""Analytics tables inherited from the project-showcase site.

They share the database (and therefore the metadata) with the storefront but
nothing in the storefront references them. `users` here is unrelated to the
auth `user` table.
"""
from sqlalchemy import BigInteger, Column, DateTime, Double, Integer, String, UniqueConstraint, func

from .db import Base


class ProjectLog(Base):
    __tablename__ = "project_logs"

    project = Column(String(255), primary_key=True)
    visit_count = Column(BigInteger, default=0, server_default="0")
    github_stars_count = Column(BigInteger, default=0, server_default="0")
    tx_count = Column(BigInteger, default=0, server_default="0")
    like_count = Column(BigInteger, default=0, server_default="0")
    members_count = Column(BigInteger, default=0, server_default="0")
    profit = Column(BigInteger, default=0, server_default="0")
    created_at = Column("createdAt", DateTime(timezone=True), server_default=func.now())


class LegacyUser(Base):
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", name="users_email_key"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    project = Column(String(255), nullable=False)
    image = Column(String(255))
    created_at = Column("createdAt", DateTime(timezone=True), server_default=func.now())


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (UniqueConstraint("project", name="project_unique"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    project = Column(String(255), nullable=False)
    project_link = Column(String(255))
    code_repo_link = Column(String(255))
    visit_count = Column(BigInteger, default=0, server_default="0")
    tx_count = Column(BigInteger, default=0, server_default="0")
    members_count = Column(BigInteger, default=0, server_default="0")
    stars_count = Column(BigInteger, default=0, server_default="0")
    earnings = Column(Double)
    high_score = Column(BigInteger)
