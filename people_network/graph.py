from sqlalchemy import select
from sqlalchemy.orm import Session, aliased

from .crud import get_person
from .models import DEFAULT_GROUP, Person, Relationship

CENTER_SHAPE = "dot"


def _node(person_id: int, name: str, group: str | None) -> dict:
    return {"id": person_id, "label": name, "group": DEFAULT_GROUP if group is None else group}


def build_network(db: Session, person_id: int) -> dict:
    """Nodes and edges for one person and their direct neighbours.

    The centre comes first in ``nodes``. Neighbours are de-duplicated by id
    but every relationship touching the centre becomes its own edge, with
    its stored direction. Outbound and inbound rows are read in two separate
    queries without a shared transaction.
    """
    center = get_person(db, person_id)
    other = aliased(Person)

    outbound = db.execute(
        select(Relationship.related_person_id, Relationship.relationship_type,
               other.name, other.group_tag)
        .join(other, other.id == Relationship.related_person_id)
        .where(Relationship.person_id == person_id)
        .order_by(Relationship.id)
    ).all()
    inbound = db.execute(
        select(Relationship.person_id, Relationship.relationship_type,
               other.name, other.group_tag)
        .join(other, other.id == Relationship.person_id)
        .where(Relationship.related_person_id == person_id)
        .order_by(Relationship.id)
    ).all()

    neighbors: dict[int, dict] = {}
    edges = []
    for target_id, label, name, group in outbound:
        neighbors[target_id] = _node(target_id, name, group)
        edges.append({"from": person_id, "to": target_id, "label": label})
    for source_id, label, name, group in inbound:
        neighbors[source_id] = _node(source_id, name, group)
        edges.append({"from": source_id, "to": person_id, "label": label})

    root = _node(center.id, center.name, center.group_tag)
    root["shape"] = CENTER_SHAPE
    return {"nodes": [root, *neighbors.values()], "edges": edges}


def build_graph(db: Session) -> dict:
    """Every person and relationship, same node/edge shape as ``build_network``."""
    people = db.scalars(select(Person).order_by(Person.id)).all()
    rels = db.scalars(select(Relationship).order_by(Relationship.id)).all()
    nodes = [_node(p.id, p.name, p.group_tag) for p in people]
    edges = [{"from": r.person_id, "to": r.related_person_id, "label": r.relationship_type}
             for r in rels]
    return {"nodes": nodes, "edges": edges}
