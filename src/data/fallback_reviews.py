"""
Fallback review dataset in Hostaway record format.

Served whenever the Hostaway API is unreachable or returns nothing
(the sandbox account has no reviews). Contents are fixed so the fallback
path is deterministic.
"""

FALLBACK_REVIEWS = [
    {
        "id": 7453,
        "type": "guest-to-host",
        "status": "published",
        "rating": None,
        "publicReview": (
            "Shane and family are wonderful! Would definitely host again. "
            "The property was immaculate and they followed all house rules perfectly. "
            "Communication was excellent throughout their stay."
        ),
        "reviewCategory": [
            {"category": "cleanliness", "rating": 9},
            {"category": "location", "rating": 10},
            {"category": "amenities", "rating": 9},
            {"category": "hospitality", "rating": 10},
        ],
        "submittedAt": "2024-11-28 16:20:12",
        "guestName": "Lisa Rodriguez",
        "listingName": "2B N1 A - 29 Shoreditch Heights",
    },
    {
        "id": 7454,
        "type": "guest-to-host",
        "status": "published",
        "rating": None,
        "publicReview": (
            "Great location near the station, but the heating was not working "
            "for the first two nights and check-in instructions arrived late."
        ),
        "reviewCategory": [
            {"category": "cleanliness", "rating": 8},
            {"category": "location", "rating": 9},
            {"category": "amenities", "rating": 5},
            {"category": "hospitality", "rating": 6},
        ],
        "submittedAt": "2024-11-20 09:45:00",
        "guestName": "Tom Becker",
        "listingName": "1B E2 B - 14 Bethnal Green Lofts",
    },
    {
        "id": 7455,
        "type": "guest-to-host",
        "status": "published",
        "rating": 10,
        "publicReview": "Spotless flat, quick replies, would stay again.",
        "reviewCategory": [
            {"category": "cleanliness", "rating": 10},
            {"category": "location", "rating": 10},
            {"category": "amenities", "rating": 10},
            {"category": "hospitality", "rating": 10},
        ],
        "submittedAt": "2024-12-02 18:05:33",
        "guestName": "Amira Haddad",
        "listingName": "2B N1 A - 29 Shoreditch Heights",
    },
    {
        "id": 7456,
        "type": "guest-to-host",
        "status": "published",
        "rating": None,
        "publicReview": "Nice studio, a bit noisy at night because of the street.",
        "reviewCategory": [
            {"category": "cleanliness", "rating": 9},
            {"category": "location", "rating": 7},
            {"category": "amenities", "rating": 8},
        ],
        "submittedAt": "2024-10-15 12:00:00",
        "guestName": "Marco Bianchi",
        "listingName": "Studio W1 C - 3 Marylebone Mews",
    },
    {
        "id": 7457,
        "type": "host-to-guest",
        "status": "published",
        "rating": None,
        "publicReview": "Respectful guest, left the apartment tidy.",
        "reviewCategory": [],
        "submittedAt": "2024-09-30 08:12:47",
        "guestName": "Hannah Olsen",
        "listingName": "1B E2 B - 14 Bethnal Green Lofts",
    },
]
