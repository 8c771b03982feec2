"""Authentication module for loading Notion credentials.

This module handles loading the Notion integration token and the blog
database id from environment variables using python-dotenv. It validates
that both are present and raises InvalidCredentialsError otherwise.
"""

import os
from typing import NamedTuple, Optional

from dotenv import load_dotenv

from .errors import InvalidCredentialsError


class Credentials(NamedTuple):
    """Notion API credentials."""
    token: str
    database_id: str


class Authenticator:
    """Loads and validates Notion credentials from environment variables.

    Credentials are loaded from a .env file using python-dotenv and are never
    logged. Explicit values passed to the constructor take precedence over
    the environment (used when configuration comes from a YAML file).

    Required environment variables:
        NOTION_TOKEN: Notion internal integration token
        DATABASE_ID: ID of the database that holds the blog posts

    Example:
        >>> auth = Authenticator()
        >>> creds = auth.get_credentials()
        >>> print(f"Syncing database {creds.database_id}")
    """

    def __init__(self, token: Optional[str] = None, database_id: Optional[str] = None):
        """Initialize the authenticator by loading environment variables from .env file.

        Args:
            token: Optional explicit integration token
            database_id: Optional explicit database id
        """
        load_dotenv()
        self._token = token
        self._database_id = database_id

    def get_credentials(self) -> Credentials:
        """Get Notion credentials from explicit values or the environment.

        Returns:
            Credentials: A named tuple containing token and database_id

        Raises:
            InvalidCredentialsError: If any required credential is missing
        """
        token = self._token or os.getenv('NOTION_TOKEN')
        database_id = self._database_id or os.getenv('DATABASE_ID')

        missing = []
        if not token:
            missing.append('NOTION_TOKEN')
        if not database_id:
            missing.append('DATABASE_ID')

        if missing:
            raise InvalidCredentialsError(
                detail=f"missing {', '.join(missing)}"
            )

        return Credentials(token=token.strip(), database_id=database_id.strip())  # type: ignore[union-attr]
