"""Example dataset for local development."""
import logging

from sqlalchemy import delete
from sqlalchemy.orm import Session

from .models import Person, Relationship

logger = logging.getLogger(__name__)

SEED_PEOPLE = [
    # key, name, group_tag, email
    ("pramod", "Pramod", "family", "pramod@example.com"),
    ("amit", "Amit", "friend", "amit@example.com"),
    ("ravi", "Ravi", "colleague", "ravi@work.com"),
    ("isha", "Isha", "family", "isha@example.com"),
]

SEED_RELATIONSHIPS = [
    ("pramod", "amit", "Brother"),
    ("pramod", "ravi", "Friend"),
    ("isha", "pramod", "Sister"),
]


def clear_all(db: Session):
    db.execute(delete(Relationship))
    db.execute(delete(Person))


def seed(db: Session, clear: bool = False) -> dict[str, int]:
    """Insert the example people and relationships in one transaction.

    Returns the new ids keyed by lower-case first name. Without ``clear``
    the dataset is appended, so running it twice yields duplicate people
    (but never duplicate relationships, since the ids differ).
    """
    if clear:
        clear_all(db)
        logger.info("Cleared all people and relationships")

    people = {key: Person(name=name, group_tag=group, email=email)
              for key, name, group, email in SEED_PEOPLE}
    db.add_all(people.values())
    db.flush()
    ids = {key: p.id for key, p in people.items()}
    db.add_all(
        Relationship(person_id=people[src].id, related_person_id=people[dst].id,
                     relationship_type=label)
        for src, dst, label in SEED_RELATIONSHIPS
    )
    db.commit()
    logger.info("Seeded %d people, %d relationships", len(ids), len(SEED_RELATIONSHIPS))
    return ids
