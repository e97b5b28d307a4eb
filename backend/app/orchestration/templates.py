"""Static city data for deterministic itinerary generation.

Place tables cover three template days per city; longer trips cycle through
them. Cities without a table use the generic template.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TemplatePlace:
    name: str
    address: str
    coordinates: tuple[float, float] = (0.0, 0.0)
    cuisine: str | None = None
    speciality: str | None = None


@dataclass(frozen=True)
class DayTemplate:
    morning: TemplatePlace
    afternoon: TemplatePlace
    evening: TemplatePlace
    breakfast: TemplatePlace
    lunch: TemplatePlace
    dinner: TemplatePlace


@dataclass(frozen=True)
class CityConfig:
    currency: str
    timezone: str
    cultural_tips: list[str] = field(default_factory=list)
    weather_info: str = ""
    budget_multiplier: float = 1.0


CITY_CONFIGS: dict[str, CityConfig] = {
    "mumbai": CityConfig(
        currency="INR",
        timezone="Asia/Kolkata",
        cultural_tips=[
            'Mumbai locals are called "Mumbaikars" and are known for their fast-paced lifestyle',
            "The city never sleeps - street food and trains run almost 24/7",
            "Monsoon season (June-September) brings heavy rains but also a unique charm",
            "Local trains are the lifeline but can be crowded during peak hours",
            "Street food culture is huge - try vada pav, bhel puri, and dosa",
        ],
        weather_info=(
            "Tropical climate with three distinct seasons: monsoon (June-September), "
            "winter (October-February), and summer (March-May). "
            "Best time to visit is October to March."
        ),
        budget_multiplier=1.0,
    ),
    "tokyo": CityConfig(
        currency="JPY",
        timezone="Asia/Tokyo",
        cultural_tips=[
            "Bowing is a traditional greeting - a slight nod is sufficient for tourists",
            "Remove shoes when entering homes, temples, and some restaurants",
            "Tipping is not customary and can sometimes be considered rude",
            "Public transportation is extremely punctual and efficient",
            "Cash is still king - many places don't accept cards",
        ],
        weather_info=(
            "Four distinct seasons. Cherry blossom (sakura) season in March-April. "
            "Hot humid summers, mild winters. Best times: March-May and September-November."
        ),
        budget_multiplier=3.5,
    ),
    "delhi": CityConfig(
        currency="INR",
        timezone="Asia/Kolkata",
        cultural_tips=[
            "Delhi has both Old Delhi (historic) and New Delhi (modern capital)",
            "Respect religious sites - cover head and remove shoes at temples/mosques",
            "Haggling is common in markets but not in malls or restaurants",
            "The city has extreme weather - very hot summers and cool winters",
            "Try local specialties like chole bhature, paranthas, and chaat",
        ],
        weather_info=(
            "Semi-arid climate with extreme temperatures. Very hot summers (40°C+), "
            "cool winters (5-20°C), monsoon (July-September). Best time: October-March."
        ),
        budget_multiplier=0.9,
    ),
}


def _p(
    name: str,
    address: str,
    lat: float,
    lon: float,
    cuisine: str | None = None,
    speciality: str | None = None,
) -> TemplatePlace:
    return TemplatePlace(name, address, (lat, lon), cuisine, speciality)


CITY_DAY_TEMPLATES: dict[str, list[DayTemplate]] = {
    "mumbai": [
        DayTemplate(
            morning=_p("Gateway of India", "Apollo Bandar, Colaba, Mumbai, Maharashtra 400001", 18.9217, 72.8347),
            afternoon=_p("Colaba Causeway", "Colaba Causeway, Colaba, Mumbai, Maharashtra 400001", 18.9187, 72.8347),
            evening=_p("Marine Drive", "Marine Drive, Mumbai, Maharashtra 400002", 18.9431, 72.8235),
            breakfast=_p("Leopold Cafe", "Colaba Causeway, Colaba, Mumbai, Maharashtra 400001", 18.9187, 72.8347, "Continental & Indian", "Vada Pav & Coffee"),
            lunch=_p("Bademiya", "Tulloch Road, Apollo Bunder, Colaba, Mumbai, Maharashtra 400001", 18.9217, 72.8347, "Mughlai & Street Food", "Seekh Kebab & Biryani"),
            dinner=_p("Trishna", "Kala Ghoda, Fort, Mumbai, Maharashtra 400001", 18.9290, 72.8347, "Seafood & Coastal", "Crab Masala & Prawns"),
        ),
        DayTemplate(
            morning=_p("Elephanta Caves", "Elephanta Island, Mumbai, Maharashtra 400094", 18.9633, 72.9315),
            afternoon=_p("Juhu Beach", "Juhu Beach, Juhu, Mumbai, Maharashtra 400049", 19.0996, 72.8347),
            evening=_p("Bandra West", "Bandra West, Mumbai, Maharashtra 400050", 19.0596, 72.8295),
            breakfast=_p("Cafe Madras", "King Circle, Matunga, Mumbai, Maharashtra 400019", 19.0176, 72.8478, "South Indian", "Masala Dosa & Filter Coffee"),
            lunch=_p("The Bombay Canteen", "Kamala Mills, Lower Parel, Mumbai, Maharashtra 400013", 19.0176, 72.8478, "Modern Indian", "Regional Thalis & Cocktails"),
            dinner=_p("Trèsind Mumbai", "BKC, Mumbai, Maharashtra 400051", 19.0596, 72.8295, "Fine Dining Indian", "Tasting Menu & Wine Pairing"),
        ),
        DayTemplate(
            morning=_p("Taj Mahal Palace", "Apollo Bunder, Colaba, Mumbai, Maharashtra 400001", 18.9217, 72.8347),
            afternoon=_p("Kala Ghoda Art District", "Kala Ghoda, Fort, Mumbai, Maharashtra 400001", 18.9290, 72.8347),
            evening=_p("Worli Sea Face", "Worli, Mumbai, Maharashtra 400018", 19.0176, 72.8478),
            breakfast=_p("K Rustom", "Churchgate, Mumbai, Maharashtra 400020", 18.9290, 72.8347, "Parsi & Continental", "Ice Cream & Sandwiches"),
            lunch=_p("Gajalee", "Vile Parle, Mumbai, Maharashtra 400056", 19.0996, 72.8347, "Seafood & Coastal", "Pomfret Fry & Prawn Curry"),
            dinner=_p("Masala Library", "BKC, Mumbai, Maharashtra 400051", 19.0596, 72.8295, "Molecular Indian", "Innovative Indian Cuisine"),
        ),
    ],
    "delhi": [
        DayTemplate(
            morning=_p("Red Fort", "Netaji Subhash Marg, Lal Qila, Old Delhi, New Delhi, Delhi 110006", 28.6562, 77.2410),
            afternoon=_p("Chandni Chowk", "Chandni Chowk, Old Delhi, Delhi 110006", 28.6562, 77.2410),
            evening=_p("India Gate", "Rajpath, New Delhi, Delhi 110001", 28.6129, 77.2295),
            breakfast=_p("Paranthe Wali Gali", "Chandni Chowk, Old Delhi, Delhi 110006", 28.6562, 77.2410, "North Indian", "Stuffed Paranthas"),
            lunch=_p("Karim's", "Jama Masjid, Old Delhi, Delhi 110006", 28.6505, 77.2334, "Mughlai", "Mutton Korma & Biryani"),
            dinner=_p("Bukhara", "ITC Maurya, New Delhi, Delhi 110037", 28.6129, 77.2295, "North Indian", "Dal Bukhara & Tandoori"),
        ),
        DayTemplate(
            morning=_p("Humayun's Tomb", "Mathura Road, Nizamuddin, New Delhi, Delhi 110013", 28.5931, 77.2506),
            afternoon=_p("Qutub Minar", "Mehrauli, New Delhi, Delhi 110030", 28.5245, 77.1855),
            evening=_p("Lodhi Garden", "Lodhi Road, New Delhi, Delhi 110003", 28.5931, 77.2506),
            breakfast=_p("Haldiram's", "Connaught Place, New Delhi, Delhi 110001", 28.6129, 77.2295, "North Indian", "Chole Bhature & Samosa"),
            lunch=_p("Pindi", "Pandara Road, New Delhi, Delhi 110011", 28.5931, 77.2506, "Punjabi", "Butter Chicken & Dal Makhani"),
            dinner=_p("Indian Accent", "The Lodhi, New Delhi, Delhi 110003", 28.5931, 77.2506, "Modern Indian", "Tasting Menu & Wine Pairing"),
        ),
        DayTemplate(
            morning=_p("Akshardham Temple", "Noida Mor, New Delhi, Delhi 110092", 28.6129, 77.2295),
            afternoon=_p("Lotus Temple", "Bahapur, New Delhi, Delhi 110019", 28.5535, 77.2588),
            evening=_p("Connaught Place", "Connaught Place, New Delhi, Delhi 110001", 28.6129, 77.2295),
            breakfast=_p("Bengali Sweet House", "Chandni Chowk, Old Delhi, Delhi 110006", 28.6562, 77.2410, "Bengali", "Rasgulla & Sandesh"),
            lunch=_p("Dhaba", "Pandara Road, New Delhi, Delhi 110011", 28.5931, 77.2506, "Punjabi Dhaba", "Sarson da Saag & Makki di Roti"),
            dinner=_p("Dum Pukht", "ITC Maurya, New Delhi, Delhi 110037", 28.6129, 77.2295, "Awadhi", "Dum Biryani & Kebabs"),
        ),
    ],
    "tokyo": [
        DayTemplate(
            morning=_p("Senso-ji Temple", "2-3-1 Asakusa, Taito City, Tokyo 111-0032, Japan", 35.7148, 139.7967),
            afternoon=_p("Tokyo Skytree", "1-1-2 Oshiage, Sumida City, Tokyo 131-0045, Japan", 35.7100, 139.8107),
            evening=_p("Asakusa District", "Asakusa, Taito City, Tokyo 111-0032, Japan", 35.7148, 139.7967),
            breakfast=_p("Tsukiji Outer Market", "Tsukiji, Chuo City, Tokyo 104-0045, Japan", 35.6654, 139.7704, "Japanese Street Food", "Fresh Sushi & Tamago"),
            lunch=_p("Ichiran Ramen", "Shibuya, Tokyo 150-0002, Japan", 35.6595, 139.7004, "Ramen", "Tonkotsu Ramen"),
            dinner=_p("Sukiyabashi Jiro", "Ginza, Chuo City, Tokyo 104-0061, Japan", 35.6720, 139.7676, "Sushi", "Omakase Sushi"),
        ),
        DayTemplate(
            morning=_p("Meiji Shrine", "1-1 Yoyogikamizonocho, Shibuya City, Tokyo 151-8557, Japan", 35.6762, 139.6993),
            afternoon=_p("Shibuya Crossing", "Shibuya, Tokyo 150-0002, Japan", 35.6595, 139.7004),
            evening=_p("Harajuku", "Harajuku, Shibuya City, Tokyo 150-0001, Japan", 35.6702, 139.7016),
            breakfast=_p("Bills", "Omotesando, Shibuya City, Tokyo 150-0001, Japan", 35.6702, 139.7016, "International", "Ricotta Hotcakes"),
            lunch=_p("Afuri Ramen", "Harajuku, Shibuya City, Tokyo 150-0001, Japan", 35.6702, 139.7016, "Ramen", "Yuzu Shio Ramen"),
            dinner=_p("Narisawa", "Minato City, Tokyo 107-0062, Japan", 35.6620, 139.7178, "French-Japanese Fusion", "Seasonal Tasting Menu"),
        ),
        DayTemplate(
            morning=_p("Imperial Palace", "1-1 Chiyoda, Chiyoda City, Tokyo 100-8111, Japan", 35.6850, 139.7528),
            afternoon=_p("Ginza District", "Ginza, Chuo City, Tokyo 104-0061, Japan", 35.6720, 139.7676),
            evening=_p("Roppongi Hills", "Roppongi, Minato City, Tokyo 106-0032, Japan", 35.6620, 139.7178),
            breakfast=_p("Gonpachi", "Nishi-Azabu, Minato City, Tokyo 106-0031, Japan", 35.6620, 139.7178, "Japanese", "Soba & Tempura"),
            lunch=_p("Sukiyabashi Jiro Honten", "Ginza, Chuo City, Tokyo 104-0061, Japan", 35.6720, 139.7676, "Sushi", "Premium Sushi"),
            dinner=_p("Ryugin", "Roppongi, Minato City, Tokyo 106-0032, Japan", 35.6620, 139.7178, "Kaiseki", "Traditional Japanese"),
        ),
    ],
}


def generic_day_template(city: str, points_of_interest: list[str] | None = None) -> DayTemplate:
    """Template for cities without a place table.

    Known point-of-interest names, when supplied, replace the generic
    morning/afternoon/evening stops in order.
    """
    stops = [f"{city} City Center", f"{city} Main Square", f"{city} Downtown"]
    for i, name in enumerate((points_of_interest or [])[:3]):
        stops[i] = name
    return DayTemplate(
        morning=TemplatePlace(stops[0], city),
        afternoon=TemplatePlace(stops[1], city),
        evening=TemplatePlace(stops[2], city),
        breakfast=TemplatePlace(f"{city} Local Cafe", city),
        lunch=TemplatePlace(f"{city} Local Restaurant", city),
        dinner=TemplatePlace(f"{city} Local Dining", city),
    )


def day_template(city: str, day: int, points_of_interest: list[str] | None = None) -> DayTemplate:
    """Template for ``day`` (1-indexed) in ``city``."""
    templates = CITY_DAY_TEMPLATES.get(city.lower())
    if not templates:
        if points_of_interest:
            # Rotate through the known sights so consecutive days differ.
            offset = ((day - 1) * 3) % len(points_of_interest)
            rotated = points_of_interest[offset:] + points_of_interest[:offset]
            return generic_day_template(city, rotated)
        return generic_day_template(city)
    return templates[(day - 1) % len(templates)]


# Seasonal weather by month, used when no forecast is available.
SEASONAL_WEATHER: dict[int, str] = {
    1: "Winter conditions likely - cool to cold days, pack warm layers",
    2: "Late winter - cool mornings and evenings, mild afternoons",
    3: "Early spring - mild temperatures with occasional showers",
    4: "Spring - pleasant days, light jacket for evenings",
    5: "Late spring - warm and mostly dry, good sightseeing weather",
    6: "Early summer - warm to hot, stay hydrated; monsoon rains in South Asia",
    7: "Peak summer - hot and humid in many regions, plan indoor breaks midday",
    8: "Late summer - hot with chance of thunderstorms or monsoon showers",
    9: "Early autumn - warm days easing into cooler evenings",
    10: "Autumn - comfortable temperatures, ideal for walking tours",
    11: "Late autumn - cool and crisp, carry a light sweater",
    12: "Early winter - cool to cold, shorter daylight hours",
}


def seasonal_weather(month: int) -> str:
    return SEASONAL_WEATHER[month]
