from datetime import datetime, timezone

import pytest

GENERATED_AT = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)


@pytest.fixture
def generated_at() -> datetime:
    return GENERATED_AT


@pytest.fixture
def product() -> dict:
    return {
        "_id": "prod-1",
        "name": "Nyeri Peaberry",
        "variety": "SL28",
        "roastLevel": "Medium",
        "processingMethod": "Washed",
        "altitudeGrown": 1800,
        "harvestDate": "2024-03-01T00:00:00Z",
        "qualityScore": 86,
        "flavorNotes": ["Blackcurrant", "Grapefruit", "Brown sugar", "Tomato"],
        "isOrganic": True,
        "isFairTrade": False,
    }


@pytest.fixture
def farmer() -> dict:
    return {
        "_id": "farmer-1",
        "name": "Wanjiru Kamau",
        "county": "Nyeri",
        "location": {"latitude": -0.42, "longitude": 36.95},
        "farmSize": 2.5,
        "altitudeRange": {"min": 1700, "max": 1900},
        "certifications": ["Organic", "Fair Trade", "Rainforest Alliance", "UTZ"],
        "sustainabilityPractices": ["Shade grown", "Composting", "Water recycling", "Mulching", "Bees"],
        "averageRating": 4.7,
        "totalReviews": 31,
        "qualityScore": 88,
        "isVerified": True,
        "brandStory": "Three generations on the slopes of Mt. Kenya.",
        "farmImages": ["https://img.example/farm.jpg"],
        "socialMedia": {"instagram": "@wanjirucoffee"},
    }
