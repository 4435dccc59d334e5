from __future__ import annotations

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_PUBLIC_DIR = "public"
DEFAULT_TEMPLATE_DIR = "templates"
DEFAULT_DATA_FILE = "drinks.csv"
DEFAULT_DB_FILE = "alcohol.sqlite3"

NAME_COLUMN = "country"

# (url segment, template, token, measure column)
CATEGORIES: tuple[tuple[str, str, str, str], ...] = (
    ("beer", "beer.html", "$$$BEER_TABLE$$$", "beer_servings"),
    ("wine", "wine.html", "$$$WINE_TABLE$$$", "wine_servings"),
    ("spirits", "spirits.html", "$$$SPIRITS_TABLE$$$", "spirit_servings"),
)

DETAIL_MEASURES: tuple[tuple[str, str], ...] = (
    ("Beer servings", "beer_servings"),
    ("Wine servings", "wine_servings"),
    ("Spirit servings", "spirit_servings"),
    ("Total litres of pure alcohol", "total_litres_of_pure_alcohol"),
)

CHART_MEASURES: tuple[tuple[str, str, str], ...] = (
    ("Beer", "beer_servings", "#4f8bc9"),
    ("Wine", "wine_servings", "#c94f8b"),
    ("Spirits", "spirit_servings", "#8bc94f"),
)

CHART_JS_URL = "https://cdn.jsdelivr.net/npm/chart.js"
