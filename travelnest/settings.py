import os

db_url = os.environ.get("DB_URL", "mongodb://localhost:27017")
db_name = os.environ.get("DB_NAME", "travelNest")

ACCESS_TOKEN_SECRET = os.environ.get(
    "ACCESS_TOKEN_SECRET", "travelnest-dev-secret-change-me-in-production"
)
TOKEN_EXPIRE_DAYS = int(os.environ.get("TOKEN_EXPIRE_DAYS", "365"))

ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")
IS_PRODUCTION = ENVIRONMENT == "production"

stripe_api_url = os.environ.get("STRIPE_API_URL", "https://api.stripe.com")
STRIPE_SECRET_KEY = os.environ.get("PAYMENT_GATEWAY_SK", "")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "CORS_ORIGINS", "http://localhost:5173,http://localhost:5174"
    ).split(",")
    if origin.strip()
]
PORT = int(os.environ.get("PORT", "3000"))
