"""User repository - administrator accounts."""
from .base import Repository


class UserRepository(Repository):
    """Repository for administrator accounts.

    Emails are stored lower-cased and are unique.

    Examples:
        >>> repo = UserRepository(db)
        >>> user_id = repo.create("admin@example.com", "password123", "Ada", "Admin")
        >>> user = repo.authenticate("admin@example.com", "password123")
    """

    _PUBLIC_COLUMNS = "id, email, first_name, last_name, created_at"

    def get_by_id(self, user_id: int) -> dict | None:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User dict (without credentials) or None if not found
        """
        return self._fetchone(
            f"SELECT {self._PUBLIC_COLUMNS} FROM users WHERE id = ?",
            (user_id,)
        )

    def get_by_email(self, email: str) -> dict | None:
        """Get user by email (case-insensitive).

        Args:
            email: Email to search

        Returns:
            User dict or None if not found
        """
        return self._fetchone(
            "SELECT * FROM users WHERE email = ?",
            (email.lower().strip(),)
        )

    def create(self, email: str, password: str, first_name: str, last_name: str = "") -> int:
        """Create new administrator.

        Args:
            email: Unique email address
            password: Plain text password (will be hashed)
            first_name: Given name
            last_name: Family name

        Returns:
            New user ID

        Raises:
            sqlite3.IntegrityError: if the email is already registered
        """
        cursor = self._execute(
            """INSERT INTO users
               (email, password_hash, first_name, last_name)
               VALUES (?, ?, ?, ?)""",
            (email.lower().strip(), self._hash_password(password),
             first_name.strip(), last_name.strip())
        )
        self._commit()
        return cursor.lastrowid

    def update_password(self, user_id: int, new_password: str) -> bool:
        """Update user password.

        Returns:
            True if user existed and was updated
        """
        cursor = self._execute(
            "UPDATE users SET password_hash = ? WHERE id = ?",
            (self._hash_password(new_password), user_id)
        )
        self._commit()
        return cursor.rowcount > 0

    def delete(self, user_id: int) -> bool:
        """Delete user and their sessions.

        Returns:
            True if user existed and was deleted
        """
        with self._transaction():
            self._execute("DELETE FROM sessions WHERE user_id = ?", (user_id,))
            cursor = self._execute("DELETE FROM users WHERE id = ?", (user_id,))
        return cursor.rowcount > 0

    def list_all(self) -> list[dict]:
        """List all administrators (without credentials)."""
        return self._fetchall(
            f"SELECT {self._PUBLIC_COLUMNS} FROM users ORDER BY id"
        )

    def authenticate(self, email: str, password: str) -> dict | None:
        """Authenticate administrator with email and password.

        Returns:
            User dict (without credentials) if authentication successful, None otherwise
        """
        user = self.get_by_email(email)
        if not user:
            return None

        if not self._verify_password(password, user["password_hash"]):
            return None
        user.pop("password_hash")
        return user
