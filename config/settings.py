"""
CanvasPrint - Centralized Configuration
========================================
All environment variables and constants are loaded here.
No other module should call os.getenv() directly.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ==========================================
# 🗄️ Database (local key-value storage)
# ==========================================
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./canvasprint.db")


# ==========================================
# 📐 Canvas Size Constraints (cm)
# ==========================================
MIN_WIDTH = 30
MIN_HEIGHT = 30
MAX_WIDTH = 300
MAX_HEIGHT = 140
DEFAULT_LARGE_SIDE = 100


# ==========================================
# 💰 Pricing
# ==========================================
MIN_SIZE_THRESHOLD = 60           # height + width below this prices at 0
MIN_DIMENSION_FOR_EXTRA = 100     # narrower side must exceed this for the tier surcharge
DEFAULT_MAX_PRICE = 850           # sizes above the last tier
PRICE_ROUNDING_THRESHOLD = 520    # below: multiples of 5, above: multiples of 10

# Canvas side color
CANVAS_COLOR_SELECTION = os.getenv("CANVAS_COLOR_SELECTION", "true").lower() == "true"
DEFAULT_SIDE_COLOR = "#FFFFFF"
COLOR_UPCHARGE_PERCENTAGE = 10
MAX_COLOR_UPCHARGE = 50


# ==========================================
# 🛒 Basket
# ==========================================
BASKET_STORAGE_KEY = "canvasprint_basket"
LAST_ORDER_STORAGE_KEY = "canvasprint_last_order"
MAX_BASKET_ITEMS = 100
MAX_ITEM_QUANTITY = 99
BASKET_STALE_DAYS = 30


# ==========================================
# 📁 File Upload
# ==========================================
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "static/uploads")
ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB


# ==========================================
# 🔧 App
# ==========================================
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))
