from sqlalchemy import Column, Integer, String
from app.database import Base

class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)

    def __repr__(self):
        return f"<Service(id={self.id}, name='{self.name}')>"
