"""
Document storage for Yahoo tokens and league settings

Each store holds exactly one JSON document. The file-backed store is the
default; yahoo_integration.database provides a SQLAlchemy-backed one.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from errors import NotAuthenticated
from .models import TokenSet

logger = logging.getLogger(__name__)


class DocumentStore:
    """Interface for loading and saving a single JSON document"""

    def load(self) -> Optional[Any]:
        """
        Return the stored document, or None if nothing has been saved yet

        Raises:
            ValueError: if the stored document cannot be parsed
        """
        raise NotImplementedError

    def save(self, document: Any) -> None:
        """Replace the stored document"""
        raise NotImplementedError


class JsonFileStore(DocumentStore):
    """Stores a document as a JSON file, replaced atomically on save"""

    def __init__(self, path):
        self.path = Path(path)

    def load(self) -> Optional[Any]:
        try:
            text = self.path.read_text(encoding='utf-8')
        except FileNotFoundError:
            return None
        return json.loads(text)

    def save(self, document: Any) -> None:
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)

        # Write next to the target so os.replace stays on one filesystem
        fd, tmp_path = tempfile.mkstemp(prefix=f'.{self.path.name}.', suffix='.tmp', dir=directory)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def __repr__(self):
        return f"JsonFileStore({str(self.path)!r})"


class TokenStore:
    """Persists the current Yahoo TokenSet"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def load(self) -> TokenSet:
        """
        Load the stored token set

        Raises:
            NotAuthenticated: if no token was saved or the stored one is unusable
        """
        try:
            document = self.store.load()
        except (OSError, ValueError) as e:
            logger.warning(f"Stored token in {self.store!r} is unreadable: {e}")
            raise NotAuthenticated("Stored Yahoo token is unreadable; visit /auth to sign in again") from e

        if document is None:
            raise NotAuthenticated("No Yahoo token stored; visit /auth to sign in")

        try:
            return TokenSet.from_dict(document)
        except ValueError as e:
            logger.warning(f"Stored token in {self.store!r} is malformed: {e}")
            raise NotAuthenticated("Stored Yahoo token is malformed; visit /auth to sign in again") from e

    def save(self, token_set: TokenSet) -> None:
        self.store.save(token_set.to_dict())
        logger.info(f"✅ Tokens saved to {self.store!r}")
