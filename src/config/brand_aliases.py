# src/config/brand_aliases.py

"""Static brand alias table: canonical brand name -> lowercase aliases.

Loaded once at import and exposed read-only.  Order matters only for
title-based brand detection, where the first canonical brand whose alias
appears in the title wins.
"""

from collections.abc import Mapping
from types import MappingProxyType

BRAND_ALIASES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        # Technology
        "Apple": ("iphone", "ipad", "macbook", "airpods", "apple"),
        "Samsung": ("samsung", "galaxy"),
        "Xiaomi": ("xiaomi", "mi", "redmi", "poco"),
        "OnePlus": ("oneplus", "one plus"),
        "Realme": ("realme", "real me"),
        "Oppo": ("oppo",),
        "Vivo": ("vivo",),
        "Google": ("google", "pixel"),
        "HP": ("hp", "hewlett-packard", "hewlett packard"),
        "Dell": ("dell",),
        "Lenovo": ("lenovo",),
        "Asus": ("asus",),
        "Acer": ("acer",),
        "MSI": ("msi",),
        "Sony": ("sony",),
        "LG": ("lg",),
        "Philips": ("philips",),
        "Panasonic": ("panasonic",),
        "Whirlpool": ("whirlpool",),
        "Bosch": ("bosch",),
        "IFB": ("ifb",),
        "Canon": ("canon",),
        "Nikon": ("nikon",),
        # Fashion
        "Nike": ("nike",),
        "Adidas": ("adidas",),
        "Puma": ("puma",),
        "Reebok": ("reebok",),
        "Levis": ("levi", "levis", "levi's"),
        "Zara": ("zara",),
        "H&M": ("h&m", "hm", "h and m"),
        "Mango": ("mango",),
        "UCB": ("ucb", "united colors of benetton", "benetton"),
        "Allen Solly": ("allen solly", "allensolly"),
        "Van Heusen": ("van heusen", "vanheusen"),
        # Beauty
        "Lakme": ("lakme", "lakmé"),
        "Maybelline": ("maybelline",),
        "L'Oreal": ("loreal", "l'oreal", "l oreal"),
        "MAC": ("mac",),
        "Revlon": ("revlon",),
        "Nykaa": ("nykaa",),
        "Mamaearth": ("mamaearth", "mama earth"),
        # Audio
        "Boat": ("boat",),
        "JBL": ("jbl",),
        "Bose": ("bose",),
        "Sennheiser": ("sennheiser",),
        # Watches
        "Fastrack": ("fastrack", "fast track"),
        "Titan": ("titan",),
        "Casio": ("casio",),
        "Fossil": ("fossil",),
        "Timex": ("timex",),
    }
)
