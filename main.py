import os
import asyncio
import pandas as pd
import csv
from typing import List
import sys
from loguru import logger

from skillbridge.models import CareerPreferences, Coordinates, LocationPreference, Match, UserProfile
from skillbridge.config import BUSINESSES_CSV, USERS_CSV, OUTPUT_CSV, BATCH_SIZE, LOG_LEVEL, DEFAULT_RADIUS_MILES
from skillbridge.clients import GeocodingClient
from skillbridge.errors import SkillBridgeError
from skillbridge.location import with_coordinates
from skillbridge.matchers.matching_orchestrator import MatchRegenerator
from skillbridge.sources import CatalogCandidateSource
from skillbridge.sources.base import split_skills
from skillbridge.stores import MatchStore


def load_users_from_csv(file_path: str, nrows: int = None) -> List[UserProfile]:
    """Load users from CSV and convert to UserProfile objects."""
    df = pd.read_csv(file_path, nrows=nrows)
    users = []
    for _, row in df.iterrows():
        # Helper to safely extract values from pandas Series, converting NaN to None
        def safe_get(col):
            if col not in row.index:
                return None
            val = row[col]
            if pd.isna(val):
                return None
            return val

        coordinates = None
        if safe_get("lat") is not None and safe_get("lng") is not None:
            coordinates = Coordinates(lat=float(row["lat"]), lng=float(row["lng"]))

        radius = DEFAULT_RADIUS_MILES
        if safe_get("radius") is not None:
            try:
                radius = float(row["radius"])
            except (ValueError, TypeError):
                radius = DEFAULT_RADIUS_MILES

        users.append(UserProfile(
            id=str(row["id"]),
            first_name=str(safe_get("first_name") or ""),
            last_name=str(safe_get("last_name") or ""),
            email=str(safe_get("email") or ""),
            university=str(safe_get("university") or ""),
            major=str(safe_get("major") or ""),
            year=str(safe_get("year") or ""),
            skills=split_skills(safe_get("skills")),
            location_preference=LocationPreference(
                city=str(safe_get("city") or ""),
                postcode=str(safe_get("postcode") or ""),
                radius=radius,
                coordinates=coordinates,
            ),
            career_preferences=CareerPreferences(
                industries=split_skills(safe_get("industries")),
                job_types=split_skills(safe_get("job_types")),
            ),
        ))
    return users


def batch_iter(users: List[UserProfile], batch_size: int):
    """
    Yield index and UserProfile slices of size `batch_size` for batched processing.
    """
    n = len(users)
    for i in range(0, n, batch_size):
        yield i, users[i:i+batch_size]


async def process_user(
    user: UserProfile,
    regenerator: MatchRegenerator,
    geocoder: GeocodingClient,
) -> List[Match]:
    """
    Run one user through geocoding and match regeneration.

    Args:
        user (UserProfile): Input profile.
        regenerator (MatchRegenerator): Shared controller bound to the catalog.
        geocoder (GeocodingClient): Resolves postcodes for users without coordinates.

    Returns:
        List[Match]: The user's new match set, or [] when the profile cannot be matched.
    """
    # 1) Resolve coordinates from the postcode when missing
    user = await with_coordinates(user, geocoder)

    # 2) Score the catalog and replace the stored matches
    try:
        return await regenerator.regenerate(user)
    except SkillBridgeError as e:
        logger.warning(f"Skipping user {user.id}: {e}")
        return []


async def main():
    """
    Orchestrate the batch regeneration run.

    - Loads the business catalog and the users.
    - Regenerates matches for each batch of users concurrently.
    - Writes matches incrementally to an output CSV.
    """
    # Initialize logs
    logger.remove()  # Remove default handler
    logger.add(sys.stderr, level=LOG_LEVEL, format="<green>{time:HH:mm:ss}</green> | <level>{message}</level>")

    catalog = CatalogCandidateSource.from_csv(BUSINESSES_CSV)
    users = load_users_from_csv(USERS_CSV)
    regenerator = MatchRegenerator(match_store=MatchStore(), candidate_source=catalog)
    geocoder = GeocodingClient()

    # Initialize output file
    output_path = OUTPUT_CSV
    if os.path.exists(output_path):
        os.remove(output_path)
    with open(output_path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "user_id", "business_id", "business_name", "relevance_score",
            "skills_match", "industry_match", "location_match", "distance_miles", "matched_skills",
        ])

    try:
        for start_idx, batch_users in batch_iter(users, BATCH_SIZE):
            logger.info(f"Processing users {start_idx}..{start_idx + len(batch_users) - 1}")

            results = await asyncio.gather(*[process_user(u, regenerator, geocoder) for u in batch_users])

            with open(output_path, "a", newline="") as f:
                writer = csv.writer(f)
                for matches in results:
                    for m in matches:
                        row = m.to_dict()
                        writer.writerow([
                            row["user_id"],
                            row["business_id"],
                            row["business_name"],
                            row["relevance_score"],
                            row["skills_match"],
                            row["industry_match"],
                            row["location_match"],
                            row["distance_miles"],
                            ";".join(row["matched_skills"]),
                        ])
    finally:
        # Cleanup: close the geocoding session to prevent unclosed connector warnings
        await geocoder.close()

if __name__ == "__main__":
    asyncio.run(main())
