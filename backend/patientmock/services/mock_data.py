"""Random mock patients for the admin generator and the seed script."""

import random
import string
from datetime import date, timedelta
from typing import Any

from patientmock.constants import DEFAULT_STATUS
from patientmock.services.normalizer import new_audit

FIRST_NAMES = [
    "John", "Jane", "Michael", "Sarah", "David", "Emily", "Robert", "Lisa",
    "James", "Mary", "William", "Patricia", "Richard", "Jennifer", "Thomas", "Linda",
]
LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis",
    "Rodriguez", "Martinez", "Hernandez", "Lopez", "Gonzalez", "Wilson", "Anderson", "Thomas",
]
TEAMS = ["Red Team", "Blue Team", "Green Team", "Yellow Team", "Purple Team"]
INSURANCE_PROVIDERS = ["Blue Cross", "Aetna", "Cigna", "UnitedHealth", "Humana"]
PAYER_IDS = ["payer-anthem", "payer-cigna", "payer-aetna"]
PAYER_TYPES = ["Insurance", "Agency", "SelfPay", "Other"]
ORDER_STATUSES = ["Pending", "Processing", "Shipped", "Delivered"]

PINNED_RATIO = 0.2


def _random_date(rng: random.Random, start: date, end: date) -> str:
    return (start + timedelta(days=rng.randrange((end - start).days))).isoformat()


def _patient_key(rng: random.Random) -> str:
    return "pt-" + "".join(rng.choices(string.ascii_lowercase + string.digits, k=8))


def build_mock_patient(rng: random.Random, identity: str, now: str) -> dict[str, Any]:
    """Build column values for one random patient.

    The insurance column holds a primaryPayer-shaped object and the
    display id is an 8-digit number, separate from the ``pt-`` key.
    """
    first_name = rng.choice(FIRST_NAMES)
    last_name = rng.choice(LAST_NAMES)

    order_number = str(rng.randrange(1_000_000_000))
    order_status = rng.choice(ORDER_STATUSES)

    return {
        "id": _patient_key(rng),
        "display_id": str(rng.randint(10_000_000, 99_999_999)),
        "first_name": first_name,
        "last_name": last_name,
        "date_of_birth": _random_date(rng, date(1940, 1, 1), date(2010, 1, 1)),
        "email": f"{first_name.lower()}.{last_name.lower()}@example.com",
        "insurance": {
            "payerId": rng.choice(PAYER_IDS),
            "payerType": rng.choice(PAYER_TYPES),
            "displayName": f"{rng.choice(INSURANCE_PROVIDERS)} - PPO",
        },
        "status": DEFAULT_STATUS,
        "is_pinned": rng.random() < PINNED_RATIO,
        "team": {"teamId": f"team-{rng.randrange(10)}", "name": rng.choice(TEAMS)},
        "last_order": {
            "orderNumber": order_number,
            "status": order_status,
            "orderDate": _random_date(rng, date(2023, 1, 1), date.today()),
            "displayText": f"{order_number} - {order_status}",
        },
        "audit": new_audit(identity, now),
    }


def build_mock_patients(
    count: int,
    identity: str,
    now: str,
    rng: random.Random | None = None,
) -> list[dict[str, Any]]:
    """Build ``count`` random patients with distinct keys."""
    rng = rng or random.Random()
    patients: list[dict[str, Any]] = []
    seen: set[str] = set()
    while len(patients) < count:
        patient = build_mock_patient(rng, identity, now)
        if patient["id"] in seen:
            continue
        seen.add(patient["id"])
        patients.append(patient)
    return patients
