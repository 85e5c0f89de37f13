from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from app.database import Base

class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_names = Column(String(150), nullable=False, default="")
    phone = Column(String(30), nullable=True)
    email = Column(String(255), nullable=True, index=True)

    orders = relationship("Order", back_populates="client")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_names}".strip()

    def __repr__(self):
        return f"<Client(id={self.id}, name='{self.full_name}')>"
