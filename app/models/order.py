from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base
from app.utils.dates import utcnow

# Name of the terminal status; line items of delivered orders no longer hold a slot
DELIVERED_STATUS = "Entregado"

class ServiceStatus(Base):
    __tablename__ = "service_statuses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)

    def __repr__(self):
        return f"<ServiceStatus(id={self.id}, name='{self.name}')>"

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(50), unique=True, nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    status_id = Column(Integer, ForeignKey("service_statuses.id"), nullable=False, index=True)
    received_at = Column(DateTime, nullable=False, default=utcnow)

    client = relationship("Client", back_populates="orders")
    status = relationship("ServiceStatus")
    details = relationship("ServiceDetail", back_populates="order")

    def __repr__(self):
        return f"<Order(id={self.id}, code='{self.code}')>"
