"""Demo catalog, reviews and synthetic bookings for simulation mode."""

import random
from datetime import date, datetime, time, timedelta

from dinereserve.models import (
    WEEKDAYS,
    Address,
    Booking,
    BookingStatus,
    ContactInfo,
    DayHours,
    Restaurant,
    Review,
)

_PHOTOS_A = [
    "https://images.pexels.com/photos/6267/menu-restaurant-vintage-table.jpg",
    "https://images.pexels.com/photos/958545/pexels-photo-958545.jpeg",
]
_PHOTOS_B = [
    "https://images.pexels.com/photos/2098085/pexels-photo-2098085.jpeg",
    "https://images.pexels.com/photos/2098082/pexels-photo-2098082.jpeg",
]


def _week(weekday: tuple[str, str], friday: tuple[str, str], saturday: tuple[str, str],
          sunday: tuple[str, str]) -> dict[str, DayHours]:
    hours = {day: DayHours(open=weekday[0], close=weekday[1]) for day in WEEKDAYS[:4]}
    hours["friday"] = DayHours(open=friday[0], close=friday[1])
    hours["saturday"] = DayHours(open=saturday[0], close=saturday[1])
    hours["sunday"] = DayHours(open=sunday[0], close=sunday[1])
    return hours


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value)


def demo_restaurants() -> list[Restaurant]:
    """The eight San Francisco Bay Area demo listings, all approved."""
    return [
        Restaurant(
            id="1",
            manager_id="1",
            name="Fog City Diner",
            description="Classic American diner with a modern twist, serving comfort "
            "food with a gourmet touch.",
            cuisine="American",
            price_range=2,
            address=Address(
                street="1300 Battery St", city="San Francisco", state="CA",
                zip_code="94111", country="USA", latitude=37.7987, longitude=-122.4007,
            ),
            contact_info=ContactInfo(
                phone="(415) 982-2000", email="info@fogcitydiner.com",
                website="https://fogcitydiner.com",
            ),
            hours=_week(("11:00", "22:00"), ("11:00", "23:00"), ("10:00", "23:00"),
                        ("10:00", "22:00")),
            images=_PHOTOS_A,
            rating=4.5, review_count=428, bookings_today=15, is_approved=True,
            created_at=_ts("2024-01-15T10:00:00+00:00"),
            updated_at=_ts("2024-03-20T15:30:00+00:00"),
        ),
        Restaurant(
            id="2",
            manager_id="2",
            name="Sushi Ran",
            description="Award-winning Japanese restaurant known for its fresh sushi "
            "and innovative fusion dishes.",
            cuisine="Japanese",
            price_range=4,
            address=Address(
                street="107 Caledonia St", city="Sausalito", state="CA",
                zip_code="94965", country="USA", latitude=37.8575, longitude=-122.4750,
            ),
            contact_info=ContactInfo(
                phone="(415) 332-3620", email="reservations@sushiran.com",
                website="https://sushiran.com",
            ),
            hours=_week(("11:30", "21:30"), ("11:30", "22:00"), ("11:30", "22:00"),
                        ("11:30", "21:30")),
            images=_PHOTOS_B,
            rating=4.8, review_count=892, bookings_today=25, is_approved=True,
            created_at=_ts("2024-01-10T09:00:00+00:00"),
            updated_at=_ts("2024-03-19T14:20:00+00:00"),
        ),
        Restaurant(
            id="3",
            manager_id="3",
            name="Chez Panisse",
            description="Iconic restaurant pioneering California cuisine with a focus "
            "on local, organic ingredients.",
            cuisine="California",
            price_range=4,
            address=Address(
                street="1517 Shattuck Ave", city="Berkeley", state="CA",
                zip_code="94709", country="USA", latitude=37.8775, longitude=-122.2697,
            ),
            contact_info=ContactInfo(
                phone="(510) 548-5525", email="info@chezpanisse.com",
                website="https://chezpanisse.com",
            ),
            hours=_week(("11:30", "22:00"), ("11:30", "22:30"), ("11:30", "22:30"),
                        ("11:30", "22:00")),
            images=_PHOTOS_A[::-1],
            rating=4.7, review_count=1567, bookings_today=30, is_approved=True,
            created_at=_ts("2024-01-05T08:00:00+00:00"),
            updated_at=_ts("2024-03-18T16:45:00+00:00"),
        ),
        Restaurant(
            id="4",
            manager_id="4",
            name="Tacolicious",
            description="Modern Mexican restaurant serving creative tacos and craft "
            "cocktails in a vibrant setting.",
            cuisine="Mexican",
            price_range=2,
            address=Address(
                street="741 Valencia St", city="San Francisco", state="CA",
                zip_code="94110", country="USA", latitude=37.7647, longitude=-122.4217,
            ),
            contact_info=ContactInfo(
                phone="(415) 626-1344", email="mission@tacolicious.com",
                website="https://tacolicious.com",
            ),
            hours=_week(("11:00", "22:00"), ("11:00", "23:00"), ("11:00", "23:00"),
                        ("11:00", "22:00")),
            images=_PHOTOS_B,
            rating=4.3, review_count=723, bookings_today=18, is_approved=True,
            created_at=_ts("2024-01-20T11:00:00+00:00"),
            updated_at=_ts("2024-03-21T13:15:00+00:00"),
        ),
        Restaurant(
            id="5",
            manager_id="5",
            name="State Bird Provisions",
            description="Innovative dim sum-style restaurant serving creative "
            "California cuisine with Asian influences.",
            cuisine="Fusion",
            price_range=3,
            address=Address(
                street="1529 Fillmore St", city="San Francisco", state="CA",
                zip_code="94115", country="USA", latitude=37.7727, longitude=-122.4347,
            ),
            contact_info=ContactInfo(
                phone="(415) 795-1272", email="info@statebirdsf.com",
                website="https://statebirdsf.com",
            ),
            hours=_week(("17:30", "22:00"), ("17:30", "22:30"), ("17:30", "22:30"),
                        ("17:30", "22:00")),
            images=_PHOTOS_A[::-1],
            rating=4.6, review_count=945, bookings_today=22, is_approved=True,
            created_at=_ts("2024-01-25T10:30:00+00:00"),
            updated_at=_ts("2024-03-22T12:00:00+00:00"),
        ),
        Restaurant(
            id="6",
            manager_id="6",
            name="Slanted Door",
            description="Modern Vietnamese restaurant with stunning views of the Bay "
            "Bridge and Ferry Building.",
            cuisine="Vietnamese",
            price_range=3,
            address=Address(
                street="1 Ferry Building #3", city="San Francisco", state="CA",
                zip_code="94111", country="USA", latitude=37.7957, longitude=-122.3937,
            ),
            contact_info=ContactInfo(
                phone="(415) 861-8032", email="info@slanteddoor.com",
                website="https://slanteddoor.com",
            ),
            hours=_week(("11:00", "22:00"), ("11:00", "22:30"), ("11:00", "22:30"),
                        ("11:00", "22:00")),
            images=_PHOTOS_B,
            rating=4.4, review_count=1123, bookings_today=28, is_approved=True,
            created_at=_ts("2024-01-30T09:15:00+00:00"),
            updated_at=_ts("2024-03-23T11:30:00+00:00"),
        ),
        Restaurant(
            id="7",
            manager_id="7",
            name="Zuni Café",
            description="Iconic restaurant known for its wood-fired chicken and "
            "Mediterranean-inspired cuisine.",
            cuisine="Mediterranean",
            price_range=3,
            address=Address(
                street="1658 Market St", city="San Francisco", state="CA",
                zip_code="94102", country="USA", latitude=37.7737, longitude=-122.4217,
            ),
            contact_info=ContactInfo(
                phone="(415) 552-2522", email="info@zunicafe.com",
                website="https://zunicafe.com",
            ),
            hours=_week(("11:30", "22:00"), ("11:30", "22:30"), ("11:30", "22:30"),
                        ("11:30", "22:00")),
            images=_PHOTOS_A[::-1],
            rating=4.5, review_count=876, bookings_today=20, is_approved=True,
            created_at=_ts("2024-02-05T08:45:00+00:00"),
            updated_at=_ts("2024-03-24T10:45:00+00:00"),
        ),
        Restaurant(
            id="8",
            manager_id="8",
            name="Benu",
            description="Three-Michelin-starred restaurant offering innovative "
            "Korean-inspired tasting menus.",
            cuisine="Korean",
            price_range=4,
            address=Address(
                street="22 Hawthorne St", city="San Francisco", state="CA",
                zip_code="94105", country="USA", latitude=37.7877, longitude=-122.4007,
            ),
            contact_info=ContactInfo(
                phone="(415) 685-4860", email="info@benusf.com",
                website="https://benusf.com",
            ),
            hours=_week(("17:30", "21:30"), ("17:30", "21:30"), ("17:30", "21:30"),
                        ("17:30", "21:30")),
            images=_PHOTOS_B,
            rating=4.9, review_count=567, bookings_today=12, is_approved=True,
            created_at=_ts("2024-02-10T10:00:00+00:00"),
            updated_at=_ts("2024-03-25T09:30:00+00:00"),
        ),
    ]


def demo_reviews() -> list[Review]:
    rows = [
        ("1", "1", "1", "John Doe", 5,
         "Amazing pasta and excellent service! The tiramisu was to die for.",
         "2023-04-12T18:30:00+00:00"),
        ("2", "1", "2", "Jane Smith", 4,
         "Great food and atmosphere. A bit loud on Friday nights but still worth it.",
         "2023-04-08T19:45:00+00:00"),
        ("3", "2", "1", "John Doe", 5,
         "Best sushi in the city! The omakase was incredible.",
         "2023-04-15T20:15:00+00:00"),
        ("4", "3", "2", "Jane Smith", 4,
         "Delicious burgers and great craft beer selection.",
         "2023-04-05T12:30:00+00:00"),
        ("5", "4", "1", "John Doe", 3,
         "Good tacos but service was a bit slow.",
         "2023-04-10T13:45:00+00:00"),
    ]
    return [
        Review(
            id=review_id, restaurant_id=restaurant_id, user_id=user_id,
            user_name=user_name, rating=rating, comment=comment, date=_ts(when),
        )
        for review_id, restaurant_id, user_id, user_name, rating, comment, when in rows
    ]


DEMO_TIMES = ["17:00", "17:30", "18:00", "18:30", "19:00", "19:30", "20:00", "20:30"]


def generate_bookings(
    today: date, rng: random.Random | None = None, days: int = 14
) -> list[Booking]:
    """Synthesize 5-14 bookings per day for the two weeks around today.

    Past bookings are completed (80%) or cancelled; today and later are
    confirmed (70%) or pending.
    """
    rng = rng or random.Random()
    bookings = []

    for offset in range(-days, days + 1):
        day = today + timedelta(days=offset)
        for j in range(rng.randint(5, 14)):
            if offset < 0:
                status = (
                    BookingStatus.COMPLETED if rng.random() > 0.2 else BookingStatus.CANCELLED
                )
            else:
                status = (
                    BookingStatus.CONFIRMED if rng.random() > 0.3 else BookingStatus.PENDING
                )
            updated = datetime.combine(today - timedelta(days=abs(offset)), time(12, 0))
            bookings.append(
                Booking(
                    id=f"booking-{day.isoformat()}-{j}",
                    restaurant_id=str(rng.randint(1, 6)),
                    user_id=str(rng.randint(1, 2)),
                    date=day,
                    time=rng.choice(DEMO_TIMES),
                    party_size=rng.randint(1, 6),
                    status=status,
                    special_requests="Window seat please" if rng.random() > 0.7 else None,
                    created_at=updated - timedelta(days=rng.randint(0, 4)),
                    updated_at=updated,
                )
            )

    return bookings
