"""Random customer generator - realistic names, emails, phones and addresses.

Emails are unique within one generated batch only. Collisions with rows that
are already stored are left to the database and reported per record by the
bulk create coordinator.
"""

import random

from app.schemas.customer import CustomerCreate

FIRST_NAMES = (
    "James", "Mary", "John", "Patricia", "Robert", "Jennifer", "Michael", "Linda",
    "William", "Barbara", "David", "Elizabeth", "Richard", "Susan", "Joseph", "Jessica",
    "Thomas", "Sarah", "Christopher", "Karen", "Charles", "Nancy", "Daniel", "Lisa",
    "Matthew", "Margaret", "Anthony", "Betty", "Mark", "Sandra", "Donald", "Ashley",
    "Steven", "Kimberly", "Andrew", "Emily", "Paul", "Donna", "Joshua", "Michelle",
    "Kenneth", "Carol", "Kevin", "Amanda", "Brian", "Melissa", "George", "Deborah",
    "Timothy", "Stephanie", "Ronald", "Dorothy", "Edward", "Rebecca", "Jason", "Sharon",
    "Jeffrey", "Laura", "Ryan", "Cynthia", "Jacob", "Amy",
)

LAST_NAMES = (
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis",
    "Rodriguez", "Martinez", "Hernandez", "Lopez", "Gonzalez", "Wilson", "Anderson", "Thomas",
    "Taylor", "Moore", "Jackson", "Martin", "Lee", "Perez", "Thompson", "White",
    "Harris", "Sanchez", "Clark", "Ramirez", "Lewis", "Robinson", "Walker", "Young",
    "Allen", "King", "Wright", "Scott", "Torres", "Nguyen", "Hill", "Flores",
    "Green", "Adams", "Nelson", "Baker", "Hall", "Rivera", "Campbell", "Mitchell",
    "Carter", "Roberts", "Gomez", "Phillips", "Evans", "Turner", "Diaz", "Parker",
    "Cruz", "Edwards", "Collins", "Reyes", "Stewart", "Morris", "Morales", "Murphy",
)

EMAIL_DOMAINS = (
    "gmail.com", "yahoo.com", "hotmail.com", "outlook.com", "icloud.com",
    "aol.com", "protonmail.com", "mail.com", "zoho.com", "gmx.com",
)

STREETS = (
    "Main St", "Oak Ave", "Maple Dr", "Park Blvd", "Cedar Ln",
    "Elm St", "Washington Ave", "Lake Rd", "Hill St", "Pine Ct",
    "First St", "Second Ave", "Third St", "Fourth Ave", "Fifth St",
    "Broadway", "Market St", "Church St", "Walnut St", "Chestnut St",
)

CITIES = (
    "New York", "Los Angeles", "Chicago", "Houston", "Phoenix",
    "Philadelphia", "San Antonio", "San Diego", "Dallas", "San Jose",
    "Austin", "Jacksonville", "Fort Worth", "Columbus", "Charlotte",
    "San Francisco", "Indianapolis", "Seattle", "Denver", "Boston",
    "Portland", "Nashville", "Memphis", "Detroit", "Baltimore",
)

STATES = (
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA",
    "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD",
    "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
    "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC",
    "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY",
)

COUNTRIES = (
    "United States", "Canada", "United Kingdom", "Australia", "Germany",
    "France", "Spain", "Italy", "Netherlands", "Sweden",
)


class RandomCustomerGenerator:
    """Generates batches of random customer payloads."""

    def __init__(self, rng: random.Random | None = None):
        """Initialize the generator.

        Args:
            rng: Random source to draw from (a fresh, unseeded one by default)
        """
        self.rng = rng or random.Random()

    def generate(self, count: int) -> list[CustomerCreate]:
        """Generate ``count`` customers with pairwise distinct emails.

        Args:
            count: Number of customers to generate (>= 0)

        Returns:
            Customers in batch order
        """
        if count < 0:
            raise ValueError("count must be greater than or equal to 0")

        customers: list[CustomerCreate] = []
        used_emails: set[str] = set()

        for index in range(count):
            first_name = self.rng.choice(FIRST_NAMES)
            last_name = self.rng.choice(LAST_NAMES)
            email = self._unique_email(first_name, last_name, index, used_emails)
            used_emails.add(email)

            customers.append(
                CustomerCreate(
                    name=f"{first_name} {last_name}",
                    email=email,
                    phone=self._phone_number(),
                    address=self._address(),
                )
            )

        return customers

    def _unique_email(
        self, first_name: str, last_name: str, index: int, used_emails: set[str]
    ) -> str:
        # Base local parts contain no digits, so "{local}{index}" cannot clash
        # with any base email or with another index.
        domain = self.rng.choice(EMAIL_DOMAINS)
        local_part = f"{first_name.lower()}.{last_name.lower()}"
        email = f"{local_part}@{domain}"
        if email in used_emails:
            return f"{local_part}{index}@{domain}"
        return email

    def _phone_number(self) -> str:
        area_code = self.rng.randint(200, 999)
        prefix = self.rng.randint(200, 999)
        line_number = self.rng.randint(1000, 9999)
        return f"+1-{area_code}-{prefix}-{line_number}"

    def _address(self) -> str:
        street_number = self.rng.randint(1, 9999)
        street = self.rng.choice(STREETS)
        city = self.rng.choice(CITIES)
        state = self.rng.choice(STATES)
        postal_code = self.rng.randint(10000, 99999)
        country = self.rng.choice(COUNTRIES)
        return f"{street_number} {street}, {city}, {state} {postal_code}, {country}"
