from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base
from app.utils.dates import utcnow

# Notes recorded when the caller does not supply one
ASSIGNED_NOTE = "assigned"
REASSIGNED_NOTE = "reassigned"
RELEASED_NOTE = "released"

class LocationHistory(Base):
    """Append-only audit row for placements and releases"""
    __tablename__ = "location_history"

    id = Column(Integer, primary_key=True, index=True)
    service_detail_id = Column(Integer, ForeignKey("service_details.id"), nullable=False, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    box_code = Column(String(50), nullable=True)
    slot_code = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    recorded_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    employee = relationship("Employee")
    order = relationship("Order")

    def __repr__(self):
        return f"<LocationHistory(id={self.id}, detail={self.service_detail_id}, notes='{self.notes}')>"
