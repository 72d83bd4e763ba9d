"""Person and relationship CRUD against the relational store."""
import logging

from pydantic import BaseModel, ValidationError
from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .errors import ConflictError, NotFoundError, ValidationFailed
from .models import DEFAULT_GROUP, Person, Relationship
from .schemas import PersonCreate, PersonUpdate, RelCreate

logger = logging.getLogger(__name__)

PERSON_FIELDS = ("name", "dob", "phone", "email", "notes", "group_tag")


def error_list(errors) -> list[dict]:
    """Reduce pydantic error dicts to JSON-safe ``{loc, msg, type}`` entries."""
    return [
        {"loc": [str(p) for p in e.get("loc", ())], "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in errors
    ]


def _validate(model: type[BaseModel], data: dict) -> BaseModel:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        failed = ValidationFailed(error_list(e.errors()))
        logger.warning("Rejected %s: %s", model.__name__, failed)
        raise failed from e


# ── People ──

def list_people(db: Session, q: str | None = None, group: str | None = None):
    stmt = select(Person)
    if q:
        stmt = stmt.where(func.lower(Person.name).contains(q.strip().lower(), autoescape=True))
    if group:
        stmt = stmt.where(Person.group_tag == group)
    return list(db.scalars(stmt.order_by(Person.id)))


def get_person(db: Session, person_id: int) -> Person:
    p = db.get(Person, person_id)
    if p is None:
        raise NotFoundError("Person", person_id)
    return p


def create_person(db: Session, name: str, dob: str | None = None, phone: str | None = None,
                  email: str | None = None, notes: str | None = None,
                  group_tag: str | None = None) -> Person:
    data = _validate(PersonCreate, {
        "name": name, "dob": dob, "phone": phone,
        "email": email, "notes": notes, "group_tag": group_tag,
    })
    p = Person(
        name=data.name, dob=data.dob, phone=data.phone, email=data.email,
        notes=data.notes, group_tag=DEFAULT_GROUP if data.group_tag is None else data.group_tag,
    )
    db.add(p); db.commit(); db.refresh(p)
    logger.info("Created person %s (%s)", p.id, p.name)
    return p


def merge_person_fields(existing: Person, changes: dict) -> dict:
    """Overlay ``changes`` on the current column values.

    Keys missing from ``changes`` keep their stored value; a key sent as
    None clears the column, except ``group_tag`` which falls back to the
    default group.
    """
    merged = {f: getattr(existing, f) for f in PERSON_FIELDS}
    merged.update({k: v for k, v in changes.items() if k in PERSON_FIELDS})
    if merged["group_tag"] is None:
        merged["group_tag"] = DEFAULT_GROUP
    return merged


def update_person(db: Session, person_id: int, **changes) -> Person:
    data = _validate(PersonUpdate, changes)
    p = get_person(db, person_id)
    merged = merge_person_fields(p, data.model_dump(exclude_unset=True))
    for field, value in merged.items():
        setattr(p, field, value)
    db.commit(); db.refresh(p)
    logger.info("Updated person %s: %s", person_id, sorted(data.model_fields_set))
    return p


def delete_person(db: Session, person_id: int) -> bool:
    """Delete a person; the store cascades to their relationships.

    Returns whether a row was removed. Missing ids are not an error.
    """
    result = db.execute(delete(Person).where(Person.id == person_id))
    db.commit()
    removed = result.rowcount > 0
    if removed:
        logger.info("Deleted person %s", person_id)
    return removed


# ── Relationships ──

def list_relationships(db: Session):
    return list(db.scalars(select(Relationship).order_by(Relationship.id)))


def get_relationship(db: Session, rel_id: int) -> Relationship:
    r = db.get(Relationship, rel_id)
    if r is None:
        raise NotFoundError("Relationship", rel_id)
    return r


def list_person_relationships(db: Session, person_id: int):
    """Every relationship with the person on either end, ordered by id."""
    get_person(db, person_id)
    stmt = (
        select(Relationship)
        .where(or_(Relationship.person_id == person_id,
                   Relationship.related_person_id == person_id))
        .order_by(Relationship.id)
    )
    return list(db.scalars(stmt))


def _people_exist(db: Session, *ids: int) -> bool:
    found = db.scalars(select(Person.id).where(Person.id.in_(ids))).all()
    return set(found) == set(ids)


def _triple_exists(db: Session, person_id: int, related_person_id: int, rel_type: str) -> bool:
    stmt = select(Relationship.id).where(
        Relationship.person_id == person_id,
        Relationship.related_person_id == related_person_id,
        Relationship.relationship_type == rel_type,
    )
    return db.scalars(stmt).first() is not None


def create_relationship(db: Session, person_id: int, related_person_id: int,
                        relationship_type: str) -> Relationship:
    data = _validate(RelCreate, {
        "person_id": person_id,
        "related_person_id": related_person_id,
        "relationship_type": relationship_type,
    })
    if data.person_id == data.related_person_id:
        logger.warning("Rejected self-relationship for person %s", data.person_id)
        raise ValidationFailed.single(
            "Cannot relate a person to themselves", loc=("related_person_id",)
        )
    if not _people_exist(db, data.person_id, data.related_person_id):
        logger.warning("Rejected relationship %s -> %s: unknown person",
                       data.person_id, data.related_person_id)
        raise ValidationFailed.single("Invalid person ids")

    r = Relationship(
        person_id=data.person_id,
        related_person_id=data.related_person_id,
        relationship_type=data.relationship_type,
    )
    db.add(r)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        # either the unique triple or a person deleted since the check above
        if _triple_exists(db, data.person_id, data.related_person_id, data.relationship_type):
            logger.warning("Duplicate relationship %s -[%s]-> %s", data.person_id,
                           data.relationship_type, data.related_person_id)
            raise ConflictError("Relationship already exists") from e
        raise ValidationFailed.single("Invalid person ids") from e
    db.refresh(r)
    logger.info("Created relationship %s: %s -[%s]-> %s", r.id, r.person_id,
                r.relationship_type, r.related_person_id)
    return r


def delete_relationship(db: Session, rel_id: int) -> bool:
    result = db.execute(delete(Relationship).where(Relationship.id == rel_id))
    db.commit()
    removed = result.rowcount > 0
    if removed:
        logger.info("Deleted relationship %s", rel_id)
    return removed
