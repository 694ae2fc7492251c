"""Declarative base shared by ORM models and migrations."""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
