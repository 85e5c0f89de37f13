from sqlalchemy import Column, Integer, String, Boolean
from app.database import Base

class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_names = Column(String(150), nullable=False, default="")
    email = Column(String(255), unique=True, index=True, nullable=True)
    active = Column(Boolean, default=True, nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_names}".strip()

    def __repr__(self):
        return f"<Employee(id={self.id}, name='{self.full_name}')>"
