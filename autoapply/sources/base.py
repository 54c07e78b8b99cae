from abc import ABC, abstractmethod
from collections.abc import Iterator

from autoapply.models import ApplyResult, Posting


class ListingSource(ABC):
    @abstractmethod
    def fetch_postings(self, session) -> Iterator[Posting]:
        pass


class ApplyAction(ABC):
    @abstractmethod
    def apply(self, session, posting: Posting, cover_letter: str) -> ApplyResult:
        pass
