"""Generic repository base."""
from typing import Generic, List, Optional, Type, TypeVar
from webtarot.utils.transaction import translate_db_errors, transactional

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Common lookups and persistence for one model class.

    Args:
        session: SQLAlchemy session (db.session in requests)
        model: Mapped model class
    """

    def __init__(self, session, model: Type[T]):
        self._session = session
        self._model = model

    def find_by_id(self, id) -> Optional[T]:
        """Find entity by primary key."""
        with translate_db_errors(f"find {self._model.__name__}"):
            return self._session.get(self._model, id)

    def find_all(self) -> List[T]:
        """Return every row of the model."""
        with translate_db_errors(f"list {self._model.__name__}"):
            return self._session.query(self._model).all()

    @transactional("save entity")
    def save(self, entity: T) -> T:
        """Add or update entity and commit."""
        self._session.add(entity)
        return entity
