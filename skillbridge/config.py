# skillbridge/config.py
from dotenv import load_dotenv
import os

load_dotenv()

# API Keys
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL")  # e.g. https://openrouter.ai/api/v1
GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY")

# LLM
LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini")
COMPANY_SIZE_RANGE = "51-100"

# Scoring
MATCH_THRESHOLD = 20
SKILLS_WEIGHT = 0.4
INDUSTRY_WEIGHT = 0.3
LOCATION_WEIGHT = 0.3
EARTH_RADIUS_MILES = 3959
DEFAULT_RADIUS_MILES = 10

# Used when a postcode cannot be geocoded (central London)
FALLBACK_LAT = 51.5074
FALLBACK_LNG = -0.1278

# Runtime parameters
CANDIDATE_TIMEOUT_SECONDS = float(os.getenv("CANDIDATE_TIMEOUT_SECONDS", "45"))
CATALOG_QUERY_LIMIT = 50
NAME_DEDUP_THRESHOLD = 92
BATCH_SIZE = 15
CONCURRENCY = 100
LOG_LEVEL = "DEBUG"

# URLs
GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

# File names
BUSINESSES_CSV = "businesses.csv"
USERS_CSV = "users.csv"
OUTPUT_CSV = "matches.csv"
