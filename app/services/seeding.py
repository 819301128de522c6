"""Demo dataset: the Sherlock Holmes Institute tour with five stops.

Loaded when the store is empty, when persisted data can't be used, and on
factory reset. Ids are fixed so two seeds produce the same records.
"""
from datetime import datetime

from app.schemas.stop import Stop
from app.schemas.tour import Tour

DEMO_TOUR_ID = "demo-sherlock-tour"

DEMO_TOUR = {
    "id": DEMO_TOUR_ID,
    "name": "The Sherlock Holmes Institute Final Exam",
    "description": (
        "Welcome, recruit! You have been selected for the final examination at the "
        "Sherlock Holmes Institute. Visit local restaurants, solve puzzles, and prove "
        "your detective skills to earn your certification as a Sunshine Agent."
    ),
    "city": "St. Petersburg, FL",
    "theme": "detective",
    "cover_image": None,
    "is_active": True,
}

DEMO_STOPS = [
    {
        "name": "Mystery Served HQ",
        "address": "116 Central Ave, St. Petersburg, FL 33701",
        "story_text": (
            "Welcome, Detective Trainee! Your application to the Mystery Served "
            "Investigations unit has been received. Before we can process your "
            "credentials, you must complete your first assignment."
        ),
        "instructions": (
            'Ask the server for your "Employment Application" envelope. Inside you\'ll '
            "find a case file with hidden clues. Look carefully at the Case File Numbers "
            "- the code is usually a simple 4-digit pin like 1212!"
        ),
        "menu_items": ["Cuban Sandwich", "Café con Leche", "Croquetas"],
        "tips": ["The Cuban comes highly recommended!", "Ask for half to-go for later stops"],
        "password": "1212",
        "gps_lat": 27.7706,
        "gps_lng": -82.6366,
        "transition_text": "Excellent work, recruit! Your observation skills are promising.",
        "next_stop_preview": "Head to Bodega on Central for your next assignment.",
    },
    {
        "name": "Bodega on Central",
        "address": "1120 Central Ave, St. Petersburg, FL 33705",
        "story_text": (
            "You've arrived at the Bodega. The Cuban comes highly recommended here. Once "
            'you\'ve ordered, speak to the waitress about your "detective training materials."'
        ),
        "instructions": (
            'Ask the waitress for the silver lockbox. The first clue is a classic detective '
            'word... maybe "mystery"? Once open, use the slide ruler inside to decode your '
            "next password."
        ),
        "menu_items": ["Cuban Sandwich", "Media Noche", "Ropa Vieja"],
        "tips": ["Request half wrapped to-go", "The dance is the Electric Slide!"],
        "password": "mystery",
        "gps_lat": 27.7710,
        "gps_lng": -82.6500,
        "transition_text": "Well done! You've cracked the cipher. The next location awaits.",
        "next_stop_preview": "Your next stop is Kalamazoo - cross over 10th Ave.",
    },
    {
        "name": "Kalamazoo",
        "address": "1400 Central Ave, St. Petersburg, FL 33705",
        "story_text": (
            "Intelligence suggests this location may be compromised. Use your detective "
            "instincts to complete this assignment quickly."
        ),
        "instructions": (
            'Order a drink and ask the bartender for the "classified envelope." Inside is a '
            "word scramble puzzle. Unscramble the letters to reveal the password."
        ),
        "menu_items": ["Craft Beer Selection", "Wings", "Sliders"],
        "tips": ["Great happy hour specials!"],
        "password": "MAGNIFY",
        "gps_lat": 27.7712,
        "gps_lng": -82.6550,
        "transition_text": "Your instincts are sharp! One more stop remains.",
        "next_stop_preview": "Head to Poppo's for your burrito briefing.",
    },
    {
        "name": "Poppo's Taqueria",
        "address": "1600 Central Ave, St. Petersburg, FL 33705",
        "story_text": (
            "Welcome to stop number four! You found your way through the investigation. "
            "Check out the menu - you have rice options, bean options, cheese options, and "
            "protein options with cold toppings included."
        ),
        "instructions": (
            "We recommend the chicken with black beans and white rice! Ask your server for "
            "the final puzzle. The menu items contain hidden numbers - combine them in order "
            "for your access code."
        ),
        "menu_items": ["Build Your Own Burrito", "Chicken Bowl", "Carnitas Tacos"],
        "tips": [
            "Chicken with black beans and white rice is the local favorite!",
            "Don't forget the Celsius drink!",
        ],
        "password": "4521",
        "gps_lat": 27.7715,
        "gps_lng": -82.6600,
        "transition_text": "Outstanding work! Proceed to your final examination.",
        "next_stop_preview": "The final stop awaits - prepare for the blacklight reveal!",
    },
    {
        "name": "The Final Examination",
        "address": "2000 Central Ave, St. Petersburg, FL 33705",
        "story_text": (
            "Agents, the mission has brought you to your final stop. The city streets hum "
            "with music, the band is playing, and the dolphins are dancing. Your task is "
            "simple, but requires teamwork."
        ),
        "instructions": (
            "Check your assignment numbers: each menu item contains a single digit. Combine "
            "them in order to form the 4-digit access code. BONUS: Use the blacklight on the "
            "table to reveal the secret dessert menu and get 15% off your next tour!"
        ),
        "menu_items": ["Coffee", "Hot Chocolate", "Secret Dessert Menu (use blacklight!)"],
        "tips": ["Work together on this one!", "The blacklight reveals hidden surprises!"],
        "password": "AGENT",
        "gps_lat": 27.7720,
        "gps_lng": -82.6650,
        "transition_text": "CONGRATULATIONS! You have completed the Sherlock Holmes Institute Final Exam!",
        "next_stop_preview": "You are now a certified Sunshine Agent!",
    },
]


def build_demo_dataset(now: datetime) -> tuple[list[Tour], list[Stop]]:
    """Return fresh demo records stamped with ``now``."""
    tour = Tour(**DEMO_TOUR, created_at=now, updated_at=now)
    stops = [
        Stop(
            **data,
            id=f"stop-{number}",
            tour_id=DEMO_TOUR_ID,
            stop_number=number,
            verification_type="text",
            failures_allowed=2,
            gps_radius=50,
            created_at=now,
        )
        for number, data in enumerate(DEMO_STOPS, start=1)
    ]
    return [tour], stops
