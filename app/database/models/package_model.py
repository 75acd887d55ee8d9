from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey, JSON

from database.init import Base
from enums.package_status import PackageStatus
from utils.dates import utcnow


class Package(Base):
    __tablename__ = "packages"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    slug = Column(String(220), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(20), nullable=False)
    duration_days = Column(Integer, nullable=False)
    duration_nights = Column(Integer, nullable=False)

    base_price = Column(Float, nullable=False)
    discount_percentage = Column(Float, default=0, nullable=False)
    # Ordered list of {"min_people", "max_people", "discount_percentage"}
    group_discounts = Column(JSON, default=list)
    group_size_min = Column(Integer, default=1, nullable=False)
    group_size_max = Column(Integer, nullable=False)

    free_cancel_days = Column(Integer, default=7, nullable=False)
    status = Column(String(20), default=PackageStatus.ACTIVE.value, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, onupdate=utcnow, nullable=True)
    deleted_at = Column(DateTime, nullable=True)

    @property
    def display_duration(self) -> str:
        return f"{self.duration_days}D/{self.duration_nights}N"
