"""
ORM models for the SRAG surveillance database.
"""

from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import Column, String, Boolean, Date, Integer, Index

class Base(DeclarativeBase):
    pass

class SragCase(Base):
    __tablename__ = "srag_cases"

    notification_id   = Column(String(50), primary_key=True)   # NU_NOTIFIC
    notification_date = Column(Date, nullable=False)           # DT_NOTIFIC
    week_number       = Column(Integer)                        # SEM_NOT
    state             = Column(String(2), nullable=False)      # SG_UF_NOT
    state_residence   = Column(String(2))                      # SG_UF
    municipality      = Column(String(10))                     # CO_MUN_NOT
    municipality_name = Column(String(100))                    # ID_MUNICIP
    municipality_res  = Column(String(10))                     # CO_MUN_RES
    sex               = Column(String(1))
    age_years         = Column(Integer)
    age_type          = Column(Integer)                        # 1=days, 2=months, 3=years
    hospitalized      = Column(Boolean, nullable=False, default=False)
    hospital_date     = Column(Date)
    icu               = Column(Boolean, nullable=False, default=False)
    icu_entry_date    = Column(Date)
    vaccinated        = Column(Boolean, nullable=False, default=False)
    dose1_date        = Column(Date)
    dose2_date        = Column(Date)
    evolution         = Column(String(2))                      # 2 = death
    evolution_date    = Column(Date)

    __table_args__ = (
        Index("ix_srag_cases_notification_date", "notification_date"),
        Index("ix_srag_cases_state", "state"),
        Index("ix_srag_cases_municipality", "municipality"),
    )
