"""
Card Ranking Ruleset — v2.0

Every keyword table, threshold and weight used by the ranking engine lives
here, so the heuristics in factors.py / rewards.py / eligibility.py carry no
inline magic numbers.

All tables are read-only (tuples, frozensets, MappingProxyType) and shared by
every request; nothing may mutate them at runtime.

Convention: HIGHER score = BETTER fit. $100 of net first-year value ≈ 1.0 point.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

RULESET_VERSION = "2.0"

MAX_REASONS = 6


# ═══════════════════════════════════════════════════════════════
# Spend categories
#   (label, AnswerRecord attribute holding the annualized spend)
# ═══════════════════════════════════════════════════════════════
SPEND_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("Groceries", "spend_groceries"),
    ("Dining", "spend_dining"),
    ("Travel", "spend_travel"),
    ("Gas", "spend_gas"),
    ("Transit", "spend_transit"),
    ("Online Shopping", "spend_online"),
    ("Rent", "spend_rent"),
    ("Entertainment", "spend_entertainment"),
    ("Utilities", "spend_utilities"),
    ("Other", "spend_other"),
)

CATEGORY_KEYWORDS = MappingProxyType({
    "Groceries": ("grocery", "groceries", "supermarket"),
    "Dining": ("dining", "restaurant", "food"),
    "Travel": ("travel", "airfare", "airline", "hotel"),
    "Gas": ("gas", "fuel"),
    "Transit": ("transit", "rideshare", "uber", "lyft", "bus"),
    "Online Shopping": ("online", "ecommerce", "amazon"),
    "Rent": ("rent", "landlord"),
    "Entertainment": ("entertainment", "movies", "concert"),
    "Utilities": ("utilities", "phone", "internet", "cable"),
    "Other": (),
})

# Reward entries whose category is exactly one of these apply to all spend
CATCH_ALL_CATEGORIES = frozenset({
    "catch_all",
    "catch-all",
    "everything",
    "everything else",
    "all purchases",
    "all other purchases",
})

DEFAULT_REWARD_RATE = 1.0


# ═══════════════════════════════════════════════════════════════
# Credit tiers
#   0 = unknown → never filter on credit
# ═══════════════════════════════════════════════════════════════
CREDIT_TIER_SCORES = MappingProxyType({
    "poor": 550,
    "fair": 630,
    "good": 700,
    "very_good": 740,
    "excellent": 800,
})

# A card stays eligible while userScore + leeway >= min_credit_score
CREDIT_SCORE_LEEWAY = 20


# ═══════════════════════════════════════════════════════════════
# Point value + monetary value
# ═══════════════════════════════════════════════════════════════
DEFAULT_POINT_VALUE = 0.01
POINT_VALUE_MAX_MULTIPLIER = 1.5

VALUE_SCORE_DIVISOR = 100.0


# ═══════════════════════════════════════════════════════════════
# Regions
# ═══════════════════════════════════════════════════════════════
NATIONAL_REGION_MARKERS = frozenset({"us", "united states", "national"})

REGION_MATCH_BOOST = 0.5
REGION_PRIORITY_BOOST = 0.5


# ═══════════════════════════════════════════════════════════════
# 1. GOAL MATCH
# ═══════════════════════════════════════════════════════════════
GOAL_SYNONYMS = MappingProxyType({
    "cash": "cashback",
    "cash_back": "cashback",
    "cashback": "cashback",
    "travel": "points_miles",
    "miles": "points_miles",
    "airline": "points_miles",
    "points": "points_miles",
    "points_miles": "points_miles",
    "low_interest": "low_interest",
    "low_apr": "low_interest",
    "balance_transfer": "low_interest",
    "build_credit": "build_credit",
    "credit_building": "build_credit",
    "rebuild_credit": "build_credit",
    "business": "business",
    "business_rewards": "business",
    "premium_perks": "premium_perks",
    "perks": "premium_perks",
    "luxury": "premium_perks",
})

GOAL_ADJACENT = MappingProxyType({
    "cashback": frozenset({"build_credit", "business"}),
    "points_miles": frozenset({"premium_perks", "business"}),
    "premium_perks": frozenset({"points_miles"}),
    "low_interest": frozenset({"build_credit"}),
    "build_credit": frozenset({"cashback", "low_interest"}),
    "business": frozenset({"cashback", "points_miles"}),
})

GOAL_EXACT_SCORE = 1.5
GOAL_SYNONYM_SCORE = 1.0
GOAL_ADJACENT_SCORE = 0.8
GOAL_WEAK_SCORE = 0.3


# ═══════════════════════════════════════════════════════════════
# 2. FEE PREFERENCE
# ═══════════════════════════════════════════════════════════════
NO_FEE_MATCH_SCORE = 1.2
# fee > 0 → floor + span * pivot / (pivot + fee), strictly decreasing in fee
NO_FEE_PENALTY_FLOOR = 0.1
NO_FEE_PENALTY_SPAN = 0.2
NO_FEE_PENALTY_PIVOT = 100.0

SMALL_FEE_CEILING = 100.0
SMALL_FEE_ZERO_SCORE = 0.9
SMALL_FEE_MATCH_SCORE = 1.0
SMALL_FEE_MID_CEILING = 250.0
SMALL_FEE_MID_SCORE = 0.4
SMALL_FEE_HIGH_SCORE = 0.2

# (minimum fee, score), first match wins
PREMIUM_FEE_TIERS: tuple[tuple[float, float], ...] = (
    (400.0, 1.0),
    (250.0, 0.8),
    (95.0, 0.6),
)
PREMIUM_FEE_LOW_SCORE = 0.2


# ═══════════════════════════════════════════════════════════════
# 3. TRAVEL FIT
# ═══════════════════════════════════════════════════════════════
TRAVEL_FREQUENCY_BASE = MappingProxyType({
    "rarely": 0.2,
    "occasionally": 0.6,
    "frequently": 1.0,
})

TRAVEL_REWARD_BONUS = 0.4
TRANSFER_PARTNER_BONUS = 0.3
NO_FOREIGN_FEE_BONUS = 0.3

# Substrings of foreign_fees text that mean "no foreign transaction fee".
# A bare "0%" is matched separately so "3.0%" does not count.
NO_FOREIGN_FEE_MARKERS = ("none", "no foreign", "no fee", "no fx", "$0", "waived")


# ═══════════════════════════════════════════════════════════════
# 4. AIRLINE / HOTEL ALIGNMENT
#   preference tag → substrings identifying the program
# ═══════════════════════════════════════════════════════════════
AIRLINE_ALIASES = MappingProxyType({
    "delta": ("delta", "skymiles"),
    "united": ("united", "mileageplus"),
    "american": ("american airlines", "aadvantage"),
    "southwest": ("southwest", "rapid rewards"),
    "jetblue": ("jetblue", "trueblue"),
    "alaska": ("alaska", "mileage plan"),
    "british_airways": ("british airways", "avios"),
    "air_canada": ("air canada", "aeroplan"),
    "air_france": ("air france", "flying blue"),
    "emirates": ("emirates", "skywards"),
    "singapore": ("singapore", "krisflyer"),
    "virgin": ("virgin",),
})

HOTEL_ALIASES = MappingProxyType({
    "marriott": ("marriott", "bonvoy"),
    "hilton": ("hilton",),
    "hyatt": ("hyatt",),
    "ihg": ("ihg", "intercontinental"),
    "wyndham": ("wyndham",),
    "choice": ("choice privileges", "choice hotels"),
})

GENERIC_AIRLINE_PREFERENCES = frozenset({"international", "any", "any_airline"})
GENERIC_HOTEL_PREFERENCES = frozenset({"international", "any", "any_hotel"})
NO_LOYALTY_PREFERENCES = frozenset({"none", "no_preference", "no"})

AIRLINE_PARTNER_SCORE = 1.5
AIRLINE_BENEFIT_SCORE = 0.7
HOTEL_PARTNER_SCORE = 1.2
HOTEL_BENEFIT_SCORE = 0.6
GENERIC_AIRLINE_SCORE = 0.7
GENERIC_HOTEL_SCORE = 0.6
LOYALTY_SCORE_CAP = 4.0


# ═══════════════════════════════════════════════════════════════
# 5. PERKS
# ═══════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class PerkRule:
    label: str
    keywords: tuple[str, ...]
    weight: float


PERK_RULES = MappingProxyType({
    "lounge": PerkRule("lounge access", ("lounge", "priority pass", "centurion"), 0.8),
    "travel_insurance": PerkRule(
        "travel insurance",
        ("travel insurance", "trip cancellation", "trip delay", "trip interruption"),
        0.5,
    ),
    "rental_car": PerkRule("rental car coverage", ("rental car", "car rental", "auto rental"), 0.4),
    "cell_phone": PerkRule("cell phone protection", ("cell phone", "mobile phone", "phone protection"), 0.4),
    "warranty": PerkRule("extended warranty", ("warranty",), 0.3),
    "purchase_protection": PerkRule("purchase protection", ("purchase protection", "purchase security"), 0.3),
    "no_foreign_fee": PerkRule("no foreign transaction fees", ("no foreign",), 0.5),
    "credits": PerkRule("statement credits", ("credit",), 0.5),
    "elite_status": PerkRule("elite status", ("elite", "status"), 0.6),
    "cashback_portal": PerkRule("shopping portal", ("portal",), 0.3),
    "airport_parking": PerkRule("airport parking", ("parking",), 0.4),
})

UNKNOWN_PERK_WEIGHT = 0.4
NO_PERKS_SCORE = 0.2
PERKS_SCORE_CAP = 2.0


# ═══════════════════════════════════════════════════════════════
# 6. CARD STRATEGY
#   strategy → (score without pairing synergy, score with synergy)
# ═══════════════════════════════════════════════════════════════
STRATEGY_SCORES = MappingProxyType({
    "minimalist": (1.0, 0.5),
    "optimizer": (0.6, 1.0),
    "balanced": (0.8, 0.8),
})


# ═══════════════════════════════════════════════════════════════
# 7. BUSINESS PREFERENCE
#   (answer, card is business) → score
#   ("no", True) is the soft exclusion: far below any positive score,
#   but the card is still returned.
# ═══════════════════════════════════════════════════════════════
BUSINESS_SCORES = MappingProxyType({
    ("no", True): -5.0,
    ("no", False): 0.0,
    ("yes", True): 1.0,
    ("yes", False): 0.1,
    ("open_to_both", True): 0.4,
    ("open_to_both", False): 0.2,
})


# ═══════════════════════════════════════════════════════════════
# 9. QUIZ METADATA TAGS
#   answer value → implicit profile tags
# ═══════════════════════════════════════════════════════════════
CREDIT_PROFILE_TAGS = MappingProxyType({
    "poor": ("credit_builder", "poor_credit"),
    "fair": ("credit_builder", "fair_credit"),
    "good": ("good_credit",),
    "very_good": ("good_credit", "excellent_credit"),
    "excellent": ("excellent_credit", "premium"),
})

TRAVEL_PROFILE_TAGS = MappingProxyType({
    "frequently": ("frequent_traveler", "travel"),
    "occasionally": ("occasional_traveler",),
    "rarely": ("homebody",),
})

BUSINESS_PROFILE_TAGS = MappingProxyType({
    "yes": ("business", "small_business"),
    "open_to_both": ("business_friendly",),
    "no": ("personal",),
})

STRATEGY_PROFILE_TAGS = MappingProxyType({
    "minimalist": ("minimalist", "simple"),
    "optimizer": ("optimizer",),
    "balanced": ("balanced",),
})

QUIZ_TAG_SCORE = 0.4
QUIZ_TAG_CAP = 1.5
QUIZ_TAG_FLOOR = 0.1


# ═══════════════════════════════════════════════════════════════
# 10. LOW INTEREST
# ═══════════════════════════════════════════════════════════════
INTRO_ZERO_SCORE = 1.2
INTRO_ZERO_LONG_SCORE = 1.5
INTRO_LONG_MONTHS = 15

BALANCE_TRANSFER_SCORE = 0.8
BALANCE_TRANSFER_ZERO_SCORE = 1.0

# (max ongoing APR %, score), first match wins
ONGOING_APR_TIERS: tuple[tuple[float, float], ...] = (
    (15.0, 0.4),
    (18.0, 0.3),
)


# ═══════════════════════════════════════════════════════════════
# Approval comfort
#   (minimum userScore − min_credit_score, score)
# ═══════════════════════════════════════════════════════════════
APPROVAL_BANDS: tuple[tuple[int, float, str], ...] = (
    (30, 2.0, "Your credit comfortably exceeds the recommended score"),
    (10, 1.5, "Your credit is above the recommended score"),
    (0, 1.0, "Your credit meets the recommended score"),
    (-10, 0.4, "Your credit is just below the recommended score"),
)
APPROVAL_FLOOR_SCORE = 0.1
APPROVAL_FLOOR_REASON = "Approval may be difficult with your credit"
