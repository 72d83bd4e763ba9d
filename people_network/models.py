from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

DEFAULT_GROUP = "friend"


class Base(DeclarativeBase):
    pass


class Person(Base):
    __tablename__ = "people"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    dob: Mapped[str | None] = mapped_column(String(32), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    group_tag: Mapped[str | None] = mapped_column(
        String(64), nullable=True, default=DEFAULT_GROUP, server_default=DEFAULT_GROUP
    )

    # the database does the cascading; the ORM must not try to null out FKs
    outgoing = relationship(
        "Relationship", foreign_keys="Relationship.person_id",
        back_populates="person", passive_deletes=True,
    )
    incoming = relationship(
        "Relationship", foreign_keys="Relationship.related_person_id",
        back_populates="related_person", passive_deletes=True,
    )


class Relationship(Base):
    __tablename__ = "relationships"
    __table_args__ = (
        UniqueConstraint("person_id", "related_person_id", "relationship_type",
                         name="uq_relationship_triple"),
        CheckConstraint("person_id <> related_person_id", name="ck_no_self_relationship"),
    )
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    person_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("people.id", ondelete="CASCADE"), nullable=False, index=True
    )
    related_person_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("people.id", ondelete="CASCADE"), nullable=False, index=True
    )
    relationship_type: Mapped[str] = mapped_column(String(100), nullable=False)

    person = relationship("Person", foreign_keys=[person_id], back_populates="outgoing")
    related_person = relationship("Person", foreign_keys=[related_person_id], back_populates="incoming")
