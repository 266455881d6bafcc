"""
Dedup passes for the import pipeline.

Matching is exact string equality on the Polish form after trimming and
lowercasing; there is no fuzzy matching.
"""

import logging

from models import normalize_polish

logger = logging.getLogger(__name__)


class DedupEngine:
    def __init__(self, store):
        self.store = store

    def existing_keys(self, values: list[str]) -> set[str]:
        return {normalize_polish(card.polish) for card in self.store.find_by_polish(values)}

    def partition_new_words(self, words: list[str]) -> tuple[list[str], list[str]]:
        """
        Pre-extraction pass for comma/lines candidates.

        Returns:
            (new_words, duplicates) in input order. Repeated candidates within
            the batch are kept as they are.
        """
        existing = self.existing_keys(words)
        new_words, duplicates = [], []
        for word in words:
            if normalize_polish(word) in existing:
                duplicates.append(word)
            else:
                new_words.append(word)

        logger.info(f"Pre-extraction dedup: {len(new_words)} new, {len(duplicates)} duplicates")
        return new_words, duplicates

    def partition_proposals(self, cards: list) -> tuple[list, list[str]]:
        """
        Post-extraction pass over proposed cards.

        Returns:
            (proposed, duplicates) where duplicates are the Polish forms of the
            cards that already exist in the store.
        """
        existing = self.existing_keys([card.polish for card in cards])
        proposed, duplicates = [], []
        for card in cards:
            if normalize_polish(card.polish) in existing:
                duplicates.append(card.polish)
            else:
                proposed.append(card)

        logger.info(
            f"Post-extraction dedup: {len(proposed)} proposed, {len(duplicates)} duplicates"
        )
        return proposed, duplicates

    def is_duplicate(self, polish: str) -> bool:
        return bool(self.store.find_by_polish([polish]))
