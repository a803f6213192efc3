"""Interface shared by the cursor stores."""
from typing import Protocol, Optional, runtime_checkable
from .models import SessionData


@runtime_checkable
class SessionStorage(Protocol):
    """
    Where a saved cursor is kept between runs.

    ``load`` returns None when nothing was saved; ``save`` replaces whatever
    was there before.
    """

    def load(self) -> Optional[SessionData]:
        ...

    def save(self, data: SessionData) -> None:
        ...

    def delete(self) -> None:
        """Forget the saved cursor."""
        ...

    def exists(self) -> bool:
        ...

    def close(self) -> None:
        """Release any handle on the backing store."""
        ...
