"""Translation of Supabase client failures into StorageError."""

from collections.abc import Iterator
from contextlib import contextmanager

from cattle_keeper.errors import CattleKeeperError, StorageError


@contextmanager
def storage_errors(message: str) -> Iterator[None]:
    """Re-raise backend failures as StorageError with a readable message."""
    try:
        yield
    except CattleKeeperError:
        raise
    except Exception as exc:
        raise StorageError(message) from exc
