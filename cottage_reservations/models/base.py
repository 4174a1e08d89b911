from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Rooms and reservations share this metadata so Alembic and
    ``Base.metadata.create_all`` see the whole schema.
    """

    pass
