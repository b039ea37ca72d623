"""
User Repository - Data Access Layer for storefront accounts (table `usuario`)
"""
from typing import Optional

from panaderia.core.database import Database


class UserRepository:
    """Lookups and inserts on `usuario`; rows are returned as dicts"""

    def __init__(self, db: Database):
        self.db = db

    def find_by_username(self, username: str) -> Optional[dict]:
        """
        Returns:
            {'id', 'username', 'password', 'admin'} or None if not found
        """
        with self.db.transaction() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("""
                    SELECT id, username, password, admin
                    FROM usuario
                    WHERE username = %s
                """, (username,))
                row = cursor.fetchone()
                return dict(row) if row else None
            finally:
                cursor.close()

    def create(self, username: str, password_hash: str, is_admin: bool = False) -> Optional[int]:
        """
        Insert a user

        Returns:
            New user ID, or None if the username is already taken
        """
        with self.db.transaction() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("""
                    INSERT INTO usuario (username, password, admin)
                    VALUES (%s, %s, %s)
                    ON CONFLICT (username) DO NOTHING
                    RETURNING id
                """, (username, password_hash, is_admin))
                row = cursor.fetchone()
                return row['id'] if row else None
            finally:
                cursor.close()
