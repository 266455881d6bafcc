"""
Bulk Import Service
Runs the propose -> review -> commit pipeline for all import modes.
"""

import logging
from typing import Any, Optional

from errors import DuplicateError, ValidationError
from services.candidates import ImportMode, normalize_candidates, normalize_manual
from services.dedup import DedupEngine
from services.proposal import CommitResult, ProposalResult, ProposedCard, ReviewSession
from services.unrecognized import UnrecognizedWordManager

logger = logging.getLogger(__name__)


class ImportService:
    """
    Orchestrates normalization, dedup, extraction and commit.

    Validation always happens before the AI backend is called, and nothing is
    written to the card set until ``commit_import``.
    """

    def __init__(self, store, extractor, unrecognized: Optional[UnrecognizedWordManager] = None):
        self.store = store
        self.extractor = extractor
        self.dedup = DedupEngine(store)
        self.unrecognized = unrecognized or UnrecognizedWordManager(store)

    def propose_import(self, mode: Any, raw_input: Any) -> ProposalResult:
        """
        Build a reviewable proposal.

        Args:
            mode: "comma", "lines" or "notes"
            raw_input: Raw learner input

        Raises:
            ValidationError: bad mode, empty input or batch size out of range
            ExtractionFormatError / ExtractionUnavailableError: AI failure
        """
        mode = ImportMode.parse(mode)
        if mode is ImportMode.MANUAL:
            raise ValidationError("Manual entries are added directly, not proposed")

        candidates = normalize_candidates(mode, raw_input)

        if mode is ImportMode.NOTES:
            return self._propose_from_notes(candidates)

        new_words, duplicates = self.dedup.partition_new_words(candidates)
        if not new_words:
            return ProposalResult(proposed_cards=[], duplicates=duplicates)

        cards = self.extractor.batch_translate(new_words)
        proposed, late_duplicates = self.dedup.partition_proposals(cards)
        return ProposalResult(proposed_cards=proposed, duplicates=duplicates + late_duplicates)

    def _propose_from_notes(self, notes: str) -> ProposalResult:
        extraction = self.extractor.extract_from_notes(notes)
        proposed, duplicates = self.dedup.partition_proposals(extraction.cards)

        records = self.unrecognized.record(extraction.unrecognized, notes)
        return ProposalResult(
            proposed_cards=proposed,
            duplicates=duplicates,
            unrecognized=[record.to_dict() for record in records],
            warnings=extraction.warnings,
        )

    def start_review(self, mode: Any, raw_input: Any) -> ReviewSession:
        result = self.propose_import(mode, raw_input)
        return ReviewSession.start().propose(result, ImportMode.parse(mode))

    def commit_import(self, cards: list) -> CommitResult:
        """
        Persist the selected proposed cards.

        Each card is checked against the store again right before its insert;
        cards that became duplicates since the proposal are skipped and
        counted. A store outage raises ``StoreError`` and keeps the cards
        inserted before it.
        """
        if not cards:
            raise ValidationError("Select at least one card to save")

        cards = [ProposedCard.from_dict(card) if isinstance(card, dict) else card for card in cards]
        # Shape errors must surface before anything is written
        if not all(isinstance(card, ProposedCard) for card in cards):
            raise ValidationError("Cards must be objects with polish and russian")

        added = []
        skipped = 0
        for card in cards:
            if not card.is_complete:
                logger.warning(f"Skipping incomplete card: {card.to_dict()}")
                skipped += 1
                continue

            if self.dedup.is_duplicate(card.polish):
                skipped += 1
                continue

            try:
                added.append(
                    self.store.insert_card(card.polish, card.russian, card.base_form, card.example)
                )
            except DuplicateError:
                # Another session inserted the same word after our check
                skipped += 1

        logger.info(f"Commit: {len(added)} added, {skipped} skipped")
        return CommitResult(added=added, skipped_count=skipped)

    def commit_session(self, session: ReviewSession) -> tuple[ReviewSession, CommitResult]:
        result = self.commit_import(session.selected_cards())
        return session.committed(), result

    def add_manual_card(
        self,
        polish: Any,
        russian: Any,
        base_form: Any = None,
        example: Any = None,
    ):
        """
        Create one card immediately, bypassing the proposal step.

        Raises:
            ValidationError: polish or russian missing
            DuplicateError: a card with the same Polish form exists
        """
        entry = normalize_manual(
            {"polish": polish, "russian": russian, "baseForm": base_form, "example": example}
        )
        if self.dedup.is_duplicate(entry.polish):
            raise DuplicateError("Card already exists")

        card = self.store.insert_card(entry.polish, entry.russian, entry.base_form, entry.example)
        logger.info(f"Manual card added: {card.id}")
        return card
