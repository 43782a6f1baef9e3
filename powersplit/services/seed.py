"""Sample data for local development and demos."""

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from powersplit.models.bill import Bill
from powersplit.models.meter_reading import MeterReading
from powersplit.models.owner import Owner
from powersplit.models.property import Property
from powersplit.services.calculation import shift_month

logger = logging.getLogger(__name__)

SAMPLE_OWNERS = [
    ("Anna", "#2563EB", Decimal("1200.0"), Decimal("95.5")),
    ("Bruno", "#16A34A", Decimal("860.0"), Decimal("140.0")),
    ("Carla", "#DC2626", Decimal("2310.0"), Decimal("60.25")),
]
FIXED_COSTS = Decimal("36.40")
PRICE_PER_KWH = Decimal("0.27")


def seed_database(db: Session, months: int = 6, today: date | None = None) -> Property | None:
    """Create one property with three owners, monthly readings and bills.

    Readings are taken on the first day of each of the last ``months + 1``
    months; every pair of consecutive readings gets a bill. Returns None
    when the database already holds properties.
    """
    if db.query(Property).first():
        logger.info("Database already has data, skipping seed")
        return None

    today = today or date.today()
    property_obj = Property(display_name="Seaside House", address="Via del Porto 12")
    db.add(property_obj)
    db.flush()

    owners = [
        Owner(property_id=property_obj.id, name=name, color=color)
        for name, color, _, _ in SAMPLE_OWNERS
    ]
    db.add_all(owners)
    db.flush()

    readings: list[MeterReading] = []
    for index in range(months + 1):
        year, month = shift_month(today.year, today.month, index - months)
        reading = MeterReading(
            property_id=property_obj.id,
            reading_date=date(year, month, 1),
            notes=f"Monthly reading {index + 1}",
        )
        # Alternate busy and quiet months
        factor = Decimal(index) + Decimal("0.2") * (index % 2)
        reading.set_readings(
            {
                owner.id: start + monthly * factor
                for owner, (_, _, start, monthly) in zip(owners, SAMPLE_OWNERS)
            }
        )
        readings.append(reading)
    db.add_all(readings)
    db.flush()

    for start, end in zip(readings, readings[1:]):
        consumption = sum(
            (
                end.get_readings()[owner.id] - start.get_readings()[owner.id]
                for owner in owners
            ),
            Decimal("0"),
        )
        db.add(
            Bill(
                property_id=property_obj.id,
                bill_date=end.reading_date,
                total_amount=(FIXED_COSTS + consumption * PRICE_PER_KWH).quantize(Decimal("0.01")),
                fixed_costs=FIXED_COSTS,
                total_consumption=consumption,
                period_start=start.reading_date,
                period_end=end.reading_date,
                start_reading_id=start.id,
                end_reading_id=end.id,
            )
        )

    db.commit()
    db.refresh(property_obj)
    logger.info(
        "Seeded property %d with %d owners, %d readings and %d bills",
        property_obj.id,
        len(owners),
        len(readings),
        months,
    )
    return property_obj
