"""Shared constants across the application."""

# Main catalog categories shown in the recommendations widget
CATALOG_CATEGORIES = (
    "Guitarristas",
    "Bateristas",
    "Tecladistas",
    "Cantores",
    "Baixistas",
    "Produtores",
    "DJs",
    "Gamers",
    "Som: Graves Potentes",
    "Som: Equilibrado",
    "Som: Energético",
)

# Personality quiz outcome buckets
QUIZ_CATEGORIES = (
    "bass-lover",
    "balanced-listener",
    "energetic",
    "studio-creator",
    "gamer",
)

# Default curation table used to seed the quiz catalog
QUIZ_CURATION: dict[str, list[str]] = {
    "bass-lover": [
        "fone-kz-edx-pro",
        "fone-kz-zsn-pro-x",
        "fone-kz-zax",
    ],
    "balanced-listener": [
        "fone-kz-zs10-pro-x",
        "fone-kz-castor",
        "fone-kz-edx-pro",
    ],
    "energetic": [
        "fone-kz-zex-pro",
        "fone-kz-zsn-pro-x",
        "fone-kz-d-fi",
    ],
    "studio-creator": [
        "fone-kz-as16-pro",
        "fone-kz-zas",
        "fone-kz-castor",
    ],
    "gamer": [
        "fone-kz-zsn-pro-x-com-microfone",
        "fone-kz-edx-pro",
        "cabo-kz-com-microfone",
    ],
}

# Tracking events accepted by the public endpoint
TRACKING_EVENTS = (
    "view",
    "click",
    "add_to_cart",
    "quiz_start",
    "quiz_complete",
    "quiz_click",
    "quiz_atc",
)

# Sanitisation limits for untrusted tracking input
HANDLE_MAX_LENGTH = 100
TITLE_MAX_LENGTH = 200
STRIPPED_CHARACTERS = "<>\"'"
