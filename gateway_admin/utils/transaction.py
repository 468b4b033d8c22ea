"""Transaction management for store writes."""


class TransactionContext:
    """
    Context manager for database transactions.

    Commits on success and rolls back when the block raises. The exception
    is always re-raised.

    Usage:
        with TransactionContext(session):
            revision = bump_revision(session)
            session.add(entry)
            # Both commit together or rollback together
    """

    def __init__(self, session):
        """
        Initialize transaction context.

        Args:
            session: SQLAlchemy session
        """
        self._session = session

    def __enter__(self):
        """Enter transaction context."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit transaction context with commit or rollback."""
        if exc_type is not None:
            self._session.rollback()
            return False
        self._session.commit()
        return False
