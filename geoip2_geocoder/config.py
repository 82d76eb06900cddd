import os

DEFAULT_LOCALE = "en"

GEOIP2_BACKEND = os.getenv("GEOIP2_BACKEND", "database")  # database, webservice
GEOIP2_DATABASE_PATH = os.getenv("GEOIP2_DATABASE_PATH", "data/GeoLite2-City.mmdb")
GEOIP2_MODEL = os.getenv("GEOIP2_MODEL", "city")  # country, city, insights

MAXMIND_ACCOUNT_ID = os.getenv("MAXMIND_ACCOUNT_ID", "")
MAXMIND_LICENSE_KEY = os.getenv("MAXMIND_LICENSE_KEY", "")
MAXMIND_HOST = os.getenv("MAXMIND_HOST", "geoip.maxmind.com")
GEOIP2_TIMEOUT_SECONDS = float(os.getenv("GEOIP2_TIMEOUT_SECONDS", "5.0"))
