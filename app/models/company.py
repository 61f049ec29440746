"""
Company database model.

A company is identified by its handle and owns zero or more job postings.
"""

from sqlalchemy import Column, Integer, String, Text, CheckConstraint
from app.core.database import Base


class Company(Base):
    """
    Company table definition.

    Reads and writes go through app.crud.company with hand-built SQL;
    this class only declares the schema.
    """
    __tablename__ = "companies"

    handle = Column(String(25), primary_key=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    num_employees = Column(Integer, nullable=True)
    logo_url = Column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("num_employees >= 0", name="ck_companies_num_employees"),
    )

    def __repr__(self):
        return f"<Company(handle='{self.handle}', name='{self.name}')>"
