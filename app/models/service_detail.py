from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base

class ServiceDetail(Base):
    """One serviced pair of shoes within an order.

    ``box_code`` and ``slot_code`` are either both set (placed) or both null
    (unplaced).
    """
    __tablename__ = "service_details"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=True)
    brand = Column(String(100), nullable=True, index=True)
    model = Column(String(100), nullable=True, index=True)
    shoe_description = Column(Text, nullable=True)
    quantity = Column(Integer, nullable=False, default=1)

    # Storage location
    box_code = Column(String(50), nullable=True, index=True)
    slot_code = Column(String(50), nullable=True, index=True)
    special_notes = Column(Text, nullable=True)
    stored_at = Column(DateTime, nullable=True)
    stored_by_id = Column(Integer, ForeignKey("employees.id"), nullable=True)

    order = relationship("Order", back_populates="details")
    service = relationship("Service")
    stored_by = relationship("Employee")

    @property
    def is_placed(self) -> bool:
        return bool(self.box_code) and bool(self.slot_code)

    def __repr__(self):
        return f"<ServiceDetail(id={self.id}, order_id={self.order_id}, box='{self.box_code}', slot='{self.slot_code}')>"
